import io

import pytest
from fastapi import HTTPException, UploadFile
from starlette.datastructures import Headers

from portfolio.routers.forms import parse_specs, parse_tags, present, read_upload

BAD_REQUEST = 400


class RecordingFile(io.BytesIO):
    """BytesIO that remembers the size of every read."""

    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.read_sizes: list[int | None] = []

    def read(self, size: int | None = -1) -> bytes:
        self.read_sizes.append(size)
        return super().read(size)


def make_upload(file: io.BytesIO, filename: str = "photo.jpg") -> UploadFile:
    return UploadFile(
        file=file, filename=filename, headers=Headers({"content-type": "image/jpeg"})
    )


def test_read_upload_is_bounded(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "10")
    file = RecordingFile(b"x" * 10_000)
    with pytest.raises(HTTPException) as exc_info:
        read_upload(make_upload(file))
    assert exc_info.value.status_code == BAD_REQUEST
    assert exc_info.value.detail == "Uploaded file exceeds the 10 byte limit"
    assert file.read_sizes == [11]
    assert file.tell() == 11  # noqa: PLR2004


def test_read_upload_at_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "10")
    upload = read_upload(make_upload(io.BytesIO(b"0123456789")))
    assert upload is not None
    assert upload.data == b"0123456789"
    assert upload.content_type == "image/jpeg"


def test_read_upload_without_file() -> None:
    assert read_upload(None) is None
    assert read_upload(make_upload(io.BytesIO(b"data"), filename="")) is None


def test_read_upload_rejects_non_media() -> None:
    with pytest.raises(HTTPException, match="Only images and videos"):
        read_upload(make_upload(io.BytesIO(b"data"), filename="notes.txt"))


def test_parse_tags() -> None:
    assert parse_tags(None) is None
    assert parse_tags("  ") == []
    assert parse_tags('["a", 2]') == ["a", "2"]
    with pytest.raises(HTTPException, match="tags must be a JSON list"):
        parse_tags('{"a": 1}')
    with pytest.raises(HTTPException, match="tags must be valid JSON"):
        parse_tags("[oops")


def test_parse_specs_and_present() -> None:
    assert parse_specs('{"iso": 100}') == {"iso": "100"}
    assert parse_specs("") == {}
    assert present(a=1, b=None, c=False) == {"a": 1, "c": False}
