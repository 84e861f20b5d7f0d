from datetime import date
from typing import Any, NoReturn

import pytest
from sqlalchemy.orm import Session

from portfolio.dao import GearDAO, PostDAO
from portfolio.media import (
    InvalidUploadError,
    MediaReferenceStore,
    validate_upload,
)
from portfolio.models import Post
from portfolio.storage import MediaNotFoundError, MediaStorage, MediaUpload, StorageError

TEN_BYTES = b"0123456789"
TWENTY_BYTES = b"abcdefghijklmnopqrst"


def post_fields(**overrides: Any) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "title": "Golden Hour",
        "category": "landscape",
        "story": "Waited three evenings for this light.",
        "location": "Santorini, Greece",
        "date": date(2024, 8, 15),
    }
    fields.update(overrides)
    return fields


def jpeg(data: bytes, filename: str = "photo.jpg") -> MediaUpload:
    return MediaUpload(data=data, filename=filename, content_type="image/jpeg")


def handle_from_locator(locator: str) -> str:
    return locator.rsplit("/", 1)[-1]


def fail(*_args: object, **_kwargs: object) -> NoReturn:
    error_message = "storage is down"
    raise StorageError(error_message)


def test_create_with_media_stores_bytes(session: Session, storage: MediaStorage) -> None:
    store = MediaReferenceStore(PostDAO(session), storage)
    post = store.create_with_media(post_fields(), jpeg(TEN_BYTES))
    assert post.id is not None
    assert post.media_url is not None
    assert post.media_handle is not None
    assert handle_from_locator(post.media_url) == post.media_handle
    assert storage.load(post.media_handle) == TEN_BYTES


def test_create_without_upload_keeps_fields(session: Session, storage: MediaStorage) -> None:
    store = MediaReferenceStore(GearDAO(session), storage)
    gear = store.create_with_media(
        {"name": "Leica M10", "type": "camera", "media_url": "https://example.com/m10.jpg"},
        None,
    )
    assert gear.media_url == "https://example.com/m10.jpg"
    assert gear.media_handle is None


def test_create_upload_failure_creates_nothing(
    session: Session, storage: MediaStorage, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(storage, "save", fail)
    store = MediaReferenceStore(PostDAO(session), storage)
    with pytest.raises(StorageError):
        store.create_with_media(post_fields(), jpeg(TEN_BYTES))
    assert session.query(Post).count() == 0


def test_create_persist_failure_logs_orphan(
    session: Session, storage: MediaStorage, caplog: pytest.LogCaptureFixture
) -> None:
    store = MediaReferenceStore(PostDAO(session), storage)
    with pytest.raises(TypeError):
        store.create_with_media(post_fields(not_a_column="x"), jpeg(TEN_BYTES))
    assert "orphaned" in caplog.text


def test_replace_media_points_at_new_bytes(session: Session, storage: MediaStorage) -> None:
    store = MediaReferenceStore(PostDAO(session), storage)
    post = store.create_with_media(post_fields(), jpeg(TEN_BYTES))
    old_handle = post.media_handle
    assert old_handle is not None

    updated = store.replace_media(post.id, jpeg(TWENTY_BYTES, "new.jpg"), {"title": "Blue Hour"})
    assert updated is not None
    assert updated.title == "Blue Hour"
    assert updated.media_handle != old_handle
    assert updated.media_handle is not None
    assert storage.load(updated.media_handle) == TWENTY_BYTES
    with pytest.raises(MediaNotFoundError):
        storage.load(old_handle)


def test_replace_media_survives_failing_delete(
    session: Session,
    storage: MediaStorage,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    store = MediaReferenceStore(PostDAO(session), storage)
    post = store.create_with_media(post_fields(), jpeg(TEN_BYTES))
    monkeypatch.setattr(storage, "delete", fail)

    updated = store.replace_media(post.id, jpeg(TWENTY_BYTES))
    assert updated is not None
    assert updated.media_handle is not None
    assert storage.load(updated.media_handle) == TWENTY_BYTES
    assert "Failed to delete stored media" in caplog.text


def test_replace_media_upload_failure_keeps_record(
    session: Session, storage: MediaStorage, monkeypatch: pytest.MonkeyPatch
) -> None:
    store = MediaReferenceStore(PostDAO(session), storage)
    post = store.create_with_media(post_fields(), jpeg(TEN_BYTES))
    original = (post.media_url, post.media_handle)
    monkeypatch.setattr(storage, "save", fail)

    with pytest.raises(StorageError):
        store.replace_media(post.id, jpeg(TWENTY_BYTES))
    session.expire_all()
    reloaded = PostDAO(session).get(post.id)
    assert reloaded is not None
    assert (reloaded.media_url, reloaded.media_handle) == original
    assert storage.load(original[1] or "") == TEN_BYTES


def test_replace_media_missing_record_uploads_nothing(
    session: Session, storage: MediaStorage, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(storage, "save", fail)
    store = MediaReferenceStore(PostDAO(session), storage)
    assert store.replace_media(9999, jpeg(TEN_BYTES)) is None


def test_update_record_without_upload_keeps_media(
    session: Session, storage: MediaStorage
) -> None:
    store = MediaReferenceStore(PostDAO(session), storage)
    post = store.create_with_media(post_fields(), jpeg(TEN_BYTES))
    handle = post.media_handle
    updated = store.update_record(post.id, {"category": "travel"})
    assert updated is not None
    assert updated.category == "travel"
    assert updated.media_handle == handle
    assert storage.load(handle or "") == TEN_BYTES


def test_delete_record_removes_media(session: Session, storage: MediaStorage) -> None:
    store = MediaReferenceStore(PostDAO(session), storage)
    post = store.create_with_media(post_fields(), jpeg(TEN_BYTES))
    handle = post.media_handle
    assert store.delete_record(post.id) is True
    assert PostDAO(session).get(post.id) is None
    with pytest.raises(MediaNotFoundError):
        storage.load(handle or "")


def test_delete_record_survives_failing_delete(
    session: Session, storage: MediaStorage, monkeypatch: pytest.MonkeyPatch
) -> None:
    store = MediaReferenceStore(PostDAO(session), storage)
    post = store.create_with_media(post_fields(), jpeg(TEN_BYTES))
    monkeypatch.setattr(storage, "delete", fail)
    assert store.delete_record(post.id) is True
    assert PostDAO(session).get(post.id) is None


def test_delete_record_missing(session: Session, storage: MediaStorage) -> None:
    store = MediaReferenceStore(PostDAO(session), storage)
    assert store.delete_record(9999) is False


def test_delete_record_without_handle_skips_storage(
    session: Session, storage: MediaStorage, monkeypatch: pytest.MonkeyPatch
) -> None:
    store = MediaReferenceStore(GearDAO(session), storage)
    gear = store.create_with_media({"name": "Profoto B10", "type": "accessory"}, None)
    calls: list[str] = []
    monkeypatch.setattr(storage, "delete", calls.append)
    assert store.delete_record(gear.id) is True
    assert calls == []


@pytest.mark.parametrize(
    ("filename", "content_type"),
    [
        ("notes.txt", "text/plain"),
        ("photo.jpg", "text/plain"),
        ("script.exe", "image/jpeg"),
        ("noextension", "image/jpeg"),
    ],
)
def test_validate_upload_rejects_non_media(filename: str, content_type: str) -> None:
    upload = MediaUpload(data=TEN_BYTES, filename=filename, content_type=content_type)
    with pytest.raises(InvalidUploadError, match="Only images and videos"):
        validate_upload(upload)


def test_validate_upload_accepts_video() -> None:
    upload = MediaUpload(data=TEN_BYTES, filename="clip.MP4", content_type="video/mp4")
    assert validate_upload(upload) is upload


def test_validate_upload_rejects_empty() -> None:
    with pytest.raises(InvalidUploadError, match="empty"):
        validate_upload(jpeg(b""))


def test_validate_upload_rejects_oversized(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "15")
    assert validate_upload(jpeg(TEN_BYTES)).size == len(TEN_BYTES)
    with pytest.raises(InvalidUploadError, match="15 byte limit"):
        validate_upload(jpeg(TWENTY_BYTES))


def test_link_external_media_discards_old_blob(
    session: Session, storage: MediaStorage
) -> None:
    store = MediaReferenceStore(GearDAO(session), storage)
    gear = store.create_with_media({"name": "Sony FX3", "type": "camera"}, jpeg(TEN_BYTES))
    old_handle = gear.media_handle
    assert old_handle is not None

    updated = store.link_external_media(gear.id, "https://example.com/fx3.jpg")
    assert updated is not None
    assert updated.media_url == "https://example.com/fx3.jpg"
    assert updated.media_handle is None
    with pytest.raises(MediaNotFoundError):
        storage.load(old_handle)


def test_link_external_media_survives_failing_delete(
    session: Session, storage: MediaStorage, monkeypatch: pytest.MonkeyPatch
) -> None:
    store = MediaReferenceStore(GearDAO(session), storage)
    gear = store.create_with_media({"name": "Sony FX3", "type": "camera"}, jpeg(TEN_BYTES))
    monkeypatch.setattr(storage, "delete", fail)
    updated = store.link_external_media(gear.id, "https://example.com/fx3.jpg")
    assert updated is not None
    assert updated.media_url == "https://example.com/fx3.jpg"


def test_link_external_media_missing_record(session: Session, storage: MediaStorage) -> None:
    store = MediaReferenceStore(GearDAO(session), storage)
    assert store.link_external_media(9999, "https://example.com/x.jpg") is None
