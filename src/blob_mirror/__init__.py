# ABOUTME: blob-mirror package.
# ABOUTME: Exports the mirror engine and the blob name sanitizer.

from .mirror import ExitStatus, MirrorEngine
from .manifest import MirrorResult, ObjectOutcome
from .sanitize import SanitizedPath, sanitize_blob_name

__all__ = [
    "ExitStatus",
    "MirrorEngine",
    "MirrorResult",
    "ObjectOutcome",
    "SanitizedPath",
    "sanitize_blob_name",
]
