# ABOUTME: Azure Blob Storage backend built on the official azure-storage-blob SDK.
# ABOUTME: Lists blobs lazily and streams blob content into local files.

import logging
from pathlib import Path
from typing import Iterator

from azure.core.exceptions import (
    AzureError,
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
)
from azure.storage.blob import ContainerClient

from .base import RemoteObject
from .exceptions import (
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    TransportError,
)

logger = logging.getLogger(__name__)


class AzureBlobStorage:
    """Read-only view of a single blob container."""

    def __init__(self, connection_string: str, container_name: str):
        """Initialize the container client.

        Args:
            connection_string: Storage account connection string.
            container_name: Name of the container to mirror.
        """
        self.container_name = container_name
        self._container_client = ContainerClient.from_connection_string(
            connection_string,
            container_name,
        )

    def list_objects(self) -> Iterator[RemoteObject]:
        """Yield every blob in the container, one page at a time.

        The next page is only requested once the caller has consumed the
        current one.
        """
        logger.info(f"Listing blobs in container '{self.container_name}'...")
        try:
            for blob in self._container_client.list_blobs():
                yield RemoteObject(name=blob.name, size=blob.size)
        except AzureError as e:
            raise self._translate_error(e) from e

    def fetch(self, name: str, destination: Path) -> int:
        """Stream a blob into a new local file.

        Args:
            name: Blob name exactly as listed.
            destination: Target file path. Must not exist yet.

        Returns:
            Number of bytes written.
        """
        # Exclusive create: never overwrite a file that appeared meanwhile
        f = open(destination, "xb")
        try:
            with f:
                downloader = self._container_client.download_blob(name)
                return downloader.readinto(f)
        except Exception as e:
            # Only remove what this call created
            destination.unlink(missing_ok=True)
            if isinstance(e, AzureError):
                raise self._translate_error(e, name) from e
            raise

    def _translate_error(self, error: AzureError, name: str | None = None) -> StorageError:
        if isinstance(error, ClientAuthenticationError):
            return StoragePermissionError(str(error), name=name, cause=error)
        if isinstance(error, ResourceNotFoundError):
            return StorageNotFoundError(str(error), name=name, cause=error)
        if isinstance(error, HttpResponseError) and error.status_code == 403:
            return StoragePermissionError(str(error), name=name, cause=error)
        return TransportError(str(error), name=name, cause=error)
