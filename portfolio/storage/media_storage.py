import os
import re
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import PurePosixPath

DEFAULT_MEDIA_BASE_URL = "/api/media"


class StorageError(Exception):
    """Base exception for media storage backends."""


class MediaNotFoundError(StorageError):
    """Raised when no stored media exists for a handle."""


@dataclass(frozen=True)
class MediaUpload:
    """An uploaded file as received from a client."""

    data: bytes
    filename: str
    content_type: str

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_video(self) -> bool:
        return self.content_type.startswith("video/")


@dataclass(frozen=True)
class StoredMedia:
    """Where stored media can be read from and how to delete it."""

    locator: str
    handle: str


def make_handle(filename: str) -> str:
    """
    Build a unique, path-safe handle that keeps the original stem and extension.
    """
    path = PurePosixPath(filename.replace("\\", "/"))
    stem = re.sub(r"[^A-Za-z0-9_-]+", "-", path.stem).strip("-")[:64] or "media"
    suffix = path.suffix.lower()
    return f"{uuid.uuid4().hex}-{stem}{suffix}"


def media_base_url() -> str:
    return os.getenv("MEDIA_BASE_URL", DEFAULT_MEDIA_BASE_URL).rstrip("/")


class MediaStorage(ABC):
    """
    Interface for media storage backends.
    """

    name: str = ""

    @abstractmethod
    def save(self, upload: MediaUpload) -> StoredMedia:
        """
        Store the upload and return its locator and deletion handle.
        Raises StorageError if the bytes could not be stored.
        """
        error_message = "save not implemented"
        raise NotImplementedError(error_message)

    @abstractmethod
    def load(self, handle: str) -> bytes:
        """
        Retrieve the raw bytes stored under handle.
        Raises MediaNotFoundError if nothing is stored there.
        """
        error_message = "load not implemented"
        raise NotImplementedError(error_message)

    @abstractmethod
    def delete(self, handle: str) -> None:
        """
        Make the bytes stored under handle unreachable.
        Deleting a handle that is already gone is not an error.
        """
        error_message = "delete not implemented"
        raise NotImplementedError(error_message)
