# ABOUTME: Capability interfaces the mirror engine needs from a storage backend.
# ABOUTME: Defines RemoteObject plus the ObjectLister and ObjectFetcher protocols.

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Protocol


@dataclass(frozen=True)
class RemoteObject:
    """A blob as listed by the container."""

    name: str
    size: int | None = None


class ObjectLister(Protocol):
    """Produces a lazy, single-pass sequence of remote objects."""

    def list_objects(self) -> Iterator[RemoteObject]:
        ...


class ObjectFetcher(Protocol):
    """Writes the content of a remote object to a local file."""

    def fetch(self, name: str, destination: Path) -> int:
        """Download object `name` into `destination` and return the bytes written.

        `destination` must not exist; implementations create it exclusively.
        """
        ...
