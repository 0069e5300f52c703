# ABOUTME: Exception hierarchy for the storage collaborator.
# ABOUTME: Azure SDK errors are translated into these before reaching the engine.


class StorageError(Exception):
    """Base exception for all storage operations."""

    def __init__(self, message: str, name: str | None = None, cause: Exception | None = None):
        self.name = name
        self.cause = cause
        super().__init__(message)


class TransportError(StorageError):
    """Raised when a network operation against the storage service fails."""


class StorageNotFoundError(StorageError):
    """Raised when a container or blob does not exist."""


class StoragePermissionError(StorageError):
    """Raised when credentials are rejected or access is denied."""
