import logging
from collections.abc import Callable

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portfolio.models import MediaBlob

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


class DatabaseStorage(MediaStorage):
    """
    Media storage that keeps the bytes in the ``media_blobs`` table.

    Each call uses its own session, so stored blobs are committed
    independently of the content record that references them.
    """

    name = "database"

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self.session_factory = session_factory

    def save(self, upload: MediaUpload) -> StoredMedia:
        handle = make_handle(upload.filename)
        blob = MediaBlob(
            handle=handle,
            filename=upload.filename,
            content_type=upload.content_type,
            size=upload.size,
            data=upload.data,
        )
        try:
            with self.session_factory() as db:
                db.add(blob)
                db.commit()
        except SQLAlchemyError as exc:
            error_message = f"Failed to store media blob: {exc}"
            raise StorageError(error_message) from exc
        logger.info("Stored %d bytes in media_blobs as %s", upload.size, handle)
        return StoredMedia(locator=f"{media_base_url()}/{handle}", handle=handle)

    def load(self, handle: str) -> bytes:
        with self.session_factory() as db:
            data = db.scalar(select(MediaBlob.data).where(MediaBlob.handle == handle))
        if data is None:
            error_message = f"Media not found: {handle}"
            raise MediaNotFoundError(error_message)
        return data

    def delete(self, handle: str) -> None:
        try:
            with self.session_factory() as db:
                db.execute(delete(MediaBlob).where(MediaBlob.handle == handle))
                db.commit()
        except SQLAlchemyError as exc:
            error_message = f"Failed to delete media blob: {exc}"
            raise StorageError(error_message) from exc
        logger.info("Deleted media blob %s", handle)
