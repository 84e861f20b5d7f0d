"""
Keeps content records and their stored media consistent.

A record (post or gear item) owns at most one live blob: ``media_url`` tells
clients where to read it and ``media_handle`` tells the storage backend what
to delete. Mutations always upload first, persist second and only then
discard the superseded blob. Uploads are fatal when they fail; discarding old
blobs is best-effort and never blocks the record change.
"""

import logging
import os
import re
from collections.abc import Mapping
from pathlib import PurePosixPath
from typing import Any, Generic

from portfolio.dao import ContentDAO, ContentT
from portfolio.storage import MediaStorage, MediaUpload

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = re.compile(r"^\.(jpe?g|png|gif|webp|mp4|mov|avi|wmv|flv|webm)$")
ALLOWED_CONTENT_TYPES = re.compile(r"^(image|video)/")
DEFAULT_MAX_UPLOAD_BYTES = 100 * 1024 * 1024


class InvalidUploadError(ValueError):
    """Raised when an uploaded file is not acceptable media."""


def max_upload_bytes() -> int:
    return int(os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES)))


def validate_upload(upload: MediaUpload) -> MediaUpload:
    suffix = PurePosixPath(upload.filename).suffix.lower()
    if not ALLOWED_EXTENSIONS.match(suffix) or not ALLOWED_CONTENT_TYPES.match(
        upload.content_type
    ):
        error_message = "Only images and videos are allowed"
        raise InvalidUploadError(error_message)
    if upload.size == 0:
        error_message = "Uploaded file is empty"
        raise InvalidUploadError(error_message)
    limit = max_upload_bytes()
    if upload.size > limit:
        error_message = f"Uploaded file exceeds the {limit} byte limit"
        raise InvalidUploadError(error_message)
    return upload


class MediaReferenceStore(Generic[ContentT]):
    """
    Create, update and delete content records together with their media.
    """

    def __init__(self, dao: ContentDAO[ContentT], storage: MediaStorage) -> None:
        self.dao = dao
        self.storage = storage

    def create_with_media(
        self, fields: Mapping[str, Any], upload: MediaUpload | None
    ) -> ContentT:
        """
        Upload the media, then persist a record that references it.

        Without an upload the record is persisted as given. If persisting
        fails after a successful upload the blob is left orphaned; that is
        logged and the persistence error propagates.
        """
        if upload is None:
            return self.dao.create(**fields)
        stored = self.storage.save(upload)
        try:
            return self.dao.create(
                **fields, media_url=stored.locator, media_handle=stored.handle
            )
        except Exception:
            logger.exception(
                "Persisting %s failed after upload; media %s is orphaned",
                self.dao.model.__name__,
                stored.handle,
            )
            raise

    def replace_media(
        self,
        record_id: int,
        upload: MediaUpload,
        fields: Mapping[str, Any] | None = None,
    ) -> ContentT | None:
        """
        Point an existing record at newly uploaded media.

        Returns None, without uploading anything, if the record does not exist.
        The previous blob is discarded after the record is committed.
        """
        record = self.dao.get(record_id)
        if record is None:
            return None
        previous_handle = record.media_handle
        stored = self.storage.save(upload)
        changes = {
            **(fields or {}),
            "media_url": stored.locator,
            "media_handle": stored.handle,
        }
        try:
            updated = self.dao.update(record_id, changes)
        except Exception:
            logger.exception(
                "Updating %s %s failed after upload; media %s is orphaned",
                self.dao.model.__name__,
                record_id,
                stored.handle,
            )
            raise
        if updated is None:
            # Deleted between the read and the write
            logger.warning(
                "%s %s vanished during media replacement",
                self.dao.model.__name__,
                record_id,
            )
            self._discard(stored.handle)
            return None
        if previous_handle and previous_handle != stored.handle:
            self._discard(previous_handle)
        return updated

    def link_external_media(
        self,
        record_id: int,
        url: str,
        fields: Mapping[str, Any] | None = None,
    ) -> ContentT | None:
        """
        Point a record at media hosted elsewhere. Any blob it owned is discarded.
        """
        record = self.dao.get(record_id)
        if record is None:
            return None
        previous_handle = record.media_handle
        changes = {**(fields or {}), "media_url": url, "media_handle": None}
        updated = self.dao.update(record_id, changes)
        if updated is not None and previous_handle:
            self._discard(previous_handle)
        return updated

    def update_record(
        self,
        record_id: int,
        fields: Mapping[str, Any],
        upload: MediaUpload | None = None,
        external_url: str | None = None,
    ) -> ContentT | None:
        """
        Apply field changes. An upload wins over an external URL.
        """
        if upload is not None:
            return self.replace_media(record_id, upload, fields)
        if external_url:
            return self.link_external_media(record_id, external_url, fields)
        return self.dao.update(record_id, fields)

    def delete_record(self, record_id: int) -> bool:
        """
        Remove the record, then discard its media.

        Returns False if the record does not exist. The record is gone even
        when discarding the media fails.
        """
        record = self.dao.get(record_id)
        if record is None:
            return False
        handle = record.media_handle
        if not self.dao.delete(record_id):
            return False
        if handle:
            self._discard(handle)
        return True

    def _discard(self, handle: str) -> None:
        try:
            self.storage.delete(handle)
        except Exception:  # noqa: BLE001
            logger.warning("Failed to delete stored media %s", handle, exc_info=True)
