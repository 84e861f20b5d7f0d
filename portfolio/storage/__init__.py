import os

from portfolio.database import SessionLocal

from .cloudinary_storage import CloudinaryStorage, CloudinaryStorageError
from .database_storage import DatabaseStorage
from .filesystem_storage import FileSystemStorage
from .media_storage import (
    MediaNotFoundError,
    MediaStorage,
    MediaUpload,
    StorageError,
    StoredMedia,
)


def get_storage_backend() -> MediaStorage:
    """
    Factory for storage backend based on STORAGE_BACKEND env var.
    Defaults to FileSystemStorage.

    Supported values (case-insensitive):
      - 'filesystem'
      - 'cloudinary'
      - 'database'
    """
    backend = os.getenv("STORAGE_BACKEND", "filesystem").lower()
    if backend in ("filesystem", ""):  # default
        return FileSystemStorage()
    if backend == "cloudinary":
        return CloudinaryStorage()
    if backend == "database":
        return DatabaseStorage(SessionLocal)
    error_message = f"Unknown storage backend: {backend}"
    raise ValueError(error_message)


__all__ = [
    "CloudinaryStorage",
    "CloudinaryStorageError",
    "DatabaseStorage",
    "FileSystemStorage",
    "MediaNotFoundError",
    "MediaStorage",
    "MediaUpload",
    "StorageError",
    "StoredMedia",
    "get_storage_backend",
]
