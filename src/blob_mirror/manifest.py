# ABOUTME: Per-object outcomes and the aggregate result of a mirror run.
# ABOUTME: Serializes the run summary to a JSON manifest.

import json
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

logger = logging.getLogger(__name__)

OutcomeStatus = Literal["downloaded", "skipped", "failed"]


@dataclass(frozen=True)
class ObjectOutcome:
    """Result of processing a single remote object."""

    name: str
    status: OutcomeStatus
    path: str | None = None
    size: int = 0
    error_type: str | None = None
    error_message: str | None = None

    @classmethod
    def downloaded(cls, name: str, path: str, size: int) -> "ObjectOutcome":
        return cls(name=name, status="downloaded", path=path, size=size)

    @classmethod
    def skipped(cls, name: str) -> "ObjectOutcome":
        return cls(name=name, status="skipped")

    @classmethod
    def failed(cls, name: str, error: BaseException, path: str | None = None) -> "ObjectOutcome":
        error_class = type(error)
        return cls(
            name=name,
            status="failed",
            path=path,
            error_type=f"{error_class.__module__}.{error_class.__qualname__}",
            error_message=str(error),
        )

    @property
    def ok(self) -> bool:
        return self.status != "failed"


@dataclass
class MirrorResult:
    """Outcomes of a mirror run, appended to as objects are processed."""

    container: str = ""
    output_root: str = ""
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None
    outcomes: list[ObjectOutcome] = field(default_factory=list)
    error_type: str | None = None
    error_message: str | None = None

    def record(self, outcome: ObjectOutcome) -> None:
        self.outcomes.append(outcome)

    def finalize(self) -> None:
        """Stamp the end of the run."""
        self.finished_at = datetime.now(timezone.utc)

    def mark_failed(self, error: BaseException) -> None:
        """Record a global error that ended the run."""
        error_class = type(error)
        self.error_type = f"{error_class.__module__}.{error_class.__qualname__}"
        self.error_message = str(error)
        if self.finished_at is None:
            self.finalize()

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def downloaded(self) -> int:
        return self._count("downloaded")

    @property
    def skipped(self) -> int:
        return self._count("skipped")

    @property
    def failed(self) -> int:
        return self._count("failed")

    @property
    def failures(self) -> list[ObjectOutcome]:
        return [o for o in self.outcomes if o.status == "failed"]

    @property
    def bytes_downloaded(self) -> int:
        return sum(o.size for o in self.outcomes if o.status == "downloaded")

    @property
    def duration_seconds(self) -> float:
        end = self.finished_at or datetime.now(timezone.utc)
        return round((end - self.started_at).total_seconds(), 2)

    @property
    def status(self) -> Literal["completed", "completed_with_warnings", "failed"]:
        if self.error_type is not None:
            return "failed"
        # Per-object failures never fail the run as a whole
        return "completed_with_warnings" if self.failed else "completed"

    def to_dict(self) -> dict:
        """Convert result to dictionary for JSON serialization."""
        return {
            "container": self.container,
            "output_root": self.output_root,
            "timestamp": self.started_at.isoformat(),
            "duration_seconds": self.duration_seconds,
            "status": self.status,
            "error": (
                {"error_type": self.error_type, "error": self.error_message}
                if self.error_type is not None else None
            ),
            "downloaded": self.downloaded,
            "skipped": self.skipped,
            "failed": self.failed,
            "bytes_downloaded": self.bytes_downloaded,
            "errors": [
                {
                    "name": o.name,
                    "path": o.path,
                    "error_type": o.error_type,
                    "error": o.error_message,
                }
                for o in self.failures
            ],
            "objects": [asdict(o) for o in self.outcomes],
        }


def save_manifest(result: MirrorResult, path: Path) -> Path:
    """Write the run result as pretty-printed JSON.

    Args:
        result: Finished mirror result.
        path: Destination file. Parent directories are created.

    Returns:
        Path to the saved file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
    logger.info(f"Saved manifest: {path}")
    return path
