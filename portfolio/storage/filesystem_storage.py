import logging
import os
from pathlib import Path

from .media_storage import (
    MediaNotFoundError,
    MediaStorage,
    MediaUpload,
    StorageError,
    StoredMedia,
    make_handle,
    media_base_url,
)

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_DIR = "./uploads"


class FileSystemStorage(MediaStorage):
    """
    Media storage using the local filesystem.
    """

    name = "filesystem"

    def __init__(self, base_path: str = "") -> None:
        self.base_path = Path(base_path or os.getenv("UPLOAD_DIR", DEFAULT_UPLOAD_DIR))

    def _path_for(self, handle: str) -> Path:
        root = self.base_path.resolve()
        file_path = (root / handle).resolve()
        if file_path.parent != root:
            error_message = f"Invalid media handle: {handle}"
            raise MediaNotFoundError(error_message)
        return file_path

    def save(self, upload: MediaUpload) -> StoredMedia:
        handle = make_handle(upload.filename)
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            self._path_for(handle).write_bytes(upload.data)
        except OSError as exc:
            error_message = f"Failed to write media file: {exc}"
            raise StorageError(error_message) from exc
        logger.info("Stored %d bytes at %s", upload.size, handle)
        return StoredMedia(locator=f"{media_base_url()}/{handle}", handle=handle)

    def load(self, handle: str) -> bytes:
        try:
            return self._path_for(handle).read_bytes()
        except FileNotFoundError as exc:
            error_message = f"Media not found: {handle}"
            raise MediaNotFoundError(error_message) from exc

    def delete(self, handle: str) -> None:
        self._path_for(handle).unlink(missing_ok=True)
        logger.info("Deleted media file %s", handle)
