# ABOUTME: Mirror engine that copies every blob of a container into a local tree.
# ABOUTME: Processes objects sequentially and isolates per-object failures.

import logging
import os
from enum import IntEnum
from pathlib import Path

from .manifest import MirrorResult, ObjectOutcome
from .sanitize import sanitize_blob_name
from .storage.base import ObjectFetcher, ObjectLister, RemoteObject

logger = logging.getLogger(__name__)


class ExitStatus(IntEnum):
    """Process exit statuses. Only global outcomes are reflected here."""

    SUCCESS = 0
    UNEXPECTED_ERROR = 1
    MISSING_OUTPUT_DIR = 2
    MISSING_CONNECTION_STRING = 3
    MISSING_CONTAINER = 4
    OUTPUT_IS_FILE = 5


class MirrorEngine:
    """Mirrors the objects of one lister/fetcher pair below an output root.

    Existing local files are never overwritten or deleted. Objects whose
    names sanitize to nothing are skipped, and errors raised while handling
    one object are recorded without stopping the run.
    """

    def __init__(
        self,
        output_root: Path | str,
        lister: ObjectLister,
        fetcher: ObjectFetcher,
        container: str = "",
    ):
        """Initialize the engine.

        Args:
            output_root: Local directory to mirror into. Made absolute here.
            lister: Source of remote objects.
            fetcher: Downloads a single object to a local path.
            container: Container name, used for reporting only.
        """
        self.output_root = Path(os.path.abspath(output_root))
        self.lister = lister
        self.fetcher = fetcher
        self.container = container
        self.result = self._new_result()

    def _new_result(self) -> MirrorResult:
        return MirrorResult(container=self.container, output_root=str(self.output_root))

    def run(self) -> ExitStatus:
        """Execute the mirror run.

        Each call starts a fresh result. Errors raised by the lister are
        recorded on the result as a failed run and then propagate to the caller.

        Returns:
            ExitStatus.OUTPUT_IS_FILE if the output root is a regular file,
            ExitStatus.SUCCESS otherwise, even if some objects failed.
        """
        self.result = self._new_result()

        if self.output_root.is_file():
            logger.error(f"Output path must not be a file: {self.output_root}")
            return ExitStatus.OUTPUT_IS_FILE

        if not self.output_root.exists():
            self.output_root.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created output directory: {self.output_root}")

        try:
            for remote_object in self.lister.list_objects():
                self.result.record(self.process_object(remote_object))
        except Exception as e:
            self.result.mark_failed(e)
            raise
        finally:
            self.result.finalize()

        return ExitStatus.SUCCESS

    def process_object(self, remote_object: RemoteObject) -> ObjectOutcome:
        """Download one object, returning its outcome instead of raising."""
        name = remote_object.name

        sanitized = sanitize_blob_name(name)
        if sanitized is None:
            logger.debug(f"Skipping '{name}': no usable path segments")
            return ObjectOutcome.skipped(name)

        relative_path = str(sanitized)
        local_path = sanitized.resolve(self.output_root)

        try:
            if local_path.exists():
                raise FileExistsError(f"'{relative_path}' already exists!")

            local_path.parent.mkdir(parents=True, exist_ok=True)

            logger.info(f"Downloading '{name}' ...")
            size = self.fetcher.fetch(name, local_path)
        except Exception as e:
            outcome = ObjectOutcome.failed(name, e, path=relative_path)
            logger.warning(f"❌ '{name}' [{outcome.error_type}] '{outcome.error_message}'")
            return outcome

        logger.info(f"✅ '{name}' -> {relative_path}")
        return ObjectOutcome.downloaded(name, relative_path, size or 0)
