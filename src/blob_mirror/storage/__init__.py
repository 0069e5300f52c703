# ABOUTME: Storage collaborator package.
# ABOUTME: Exports the capability protocols, the Azure backend and its errors.

from .azure import AzureBlobStorage
from .base import ObjectFetcher, ObjectLister, RemoteObject
from .exceptions import (
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    TransportError,
)

__all__ = [
    "AzureBlobStorage",
    "ObjectFetcher",
    "ObjectLister",
    "RemoteObject",
    "StorageError",
    "StorageNotFoundError",
    "StoragePermissionError",
    "TransportError",
]
