# ABOUTME: Turns remote blob names into safe relative filesystem paths.
# ABOUTME: Replaces illegal filename characters and drops empty segments.

from dataclasses import dataclass
from pathlib import Path

# Characters no filename may contain on any supported platform
INVALID_FILENAME_CHARS = frozenset(
    [chr(i) for i in range(32)] + ['<', '>', ':', '"', '/', '\\', '|', '?', '*']
)

REPLACEMENT_CHAR = "_"

# Segments that would escape or alias the current directory
RELATIVE_SEGMENTS = {".", ".."}


@dataclass(frozen=True)
class SanitizedPath:
    """Safe relative path derived from a blob name. Always has at least one segment."""

    segments: tuple[str, ...]

    def __post_init__(self):
        if not self.segments:
            raise ValueError("SanitizedPath requires at least one segment")

    def __str__(self) -> str:
        return "/".join(self.segments)

    def resolve(self, root: Path) -> Path:
        """Join the segments onto root using path semantics."""
        return root.joinpath(*self.segments)


def sanitize_segment(segment: str) -> str:
    """Clean a single path segment.

    Trims whitespace, replaces every illegal character with an underscore,
    then trims the result again.
    """
    segment = segment.strip()
    cleaned = "".join(
        REPLACEMENT_CHAR if ch in INVALID_FILENAME_CHARS else ch
        for ch in segment
    )
    return cleaned.strip()


def sanitize_blob_name(blob_name: str) -> SanitizedPath | None:
    """Map a blob name to a safe relative path.

    Args:
        blob_name: Slash-delimited blob name as listed by the container.

    Returns:
        SanitizedPath, or None if nothing usable remains and the blob
        should be skipped.
    """
    segments = []
    for raw in blob_name.split("/"):
        segment = sanitize_segment(raw)
        if not segment or segment in RELATIVE_SEGMENTS:
            continue
        segments.append(segment)

    if not segments:
        return None

    return SanitizedPath(tuple(segments))
