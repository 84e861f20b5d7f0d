"""
Helpers for multipart form endpoints.
"""

import json
from typing import Any

from fastapi import HTTPException, UploadFile, status

from portfolio.media import InvalidUploadError, max_upload_bytes, validate_upload
from portfolio.storage import MediaUpload


def read_upload(file: UploadFile | None) -> MediaUpload | None:
    """
    Read and validate an optional uploaded file. Raises 400 for unacceptable media.
    """
    if file is None or not file.filename:
        return None
    limit = max_upload_bytes()
    # One byte past the limit is enough to know the upload is too large
    data = file.file.read(limit + 1)
    if len(data) > limit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Uploaded file exceeds the {limit} byte limit",
        )
    upload = MediaUpload(
        data=data,
        filename=file.filename,
        content_type=file.content_type or "application/octet-stream",
    )
    try:
        return validate_upload(upload)
    except InvalidUploadError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc


def _parse_json(raw: str, field: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{field} must be valid JSON",
        ) from exc


def parse_tags(raw: str | None) -> list[str] | None:
    """Parse a JSON list of tags; None when the field was not sent."""
    if raw is None:
        return None
    if not raw.strip():
        return []
    value = _parse_json(raw, "tags")
    if not isinstance(value, list):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="tags must be a JSON list",
        )
    return [str(tag) for tag in value]


def parse_specs(raw: str | None) -> dict[str, str] | None:
    """Parse a JSON object of gear specs; values are kept as strings."""
    if raw is None:
        return None
    if not raw.strip():
        return {}
    value = _parse_json(raw, "specs")
    if not isinstance(value, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="specs must be a JSON object",
        )
    return {str(key): str(val) for key, val in value.items()}


def present(**fields: Any) -> dict[str, Any]:
    """Keep only the fields the client actually sent."""
    return {name: value for name, value in fields.items() if value is not None}
