import hashlib
import logging
import os
import time
from pathlib import PurePosixPath

import requests

from .media_storage import (
    MediaNotFoundError,
    MediaStorage,
    MediaUpload,
    StorageError,
    StoredMedia,
    make_handle,
)

logger = logging.getLogger(__name__)


class CloudinaryStorageError(StorageError):
    """Custom exception for CloudinaryStorage errors."""


class CloudinaryStorage(MediaStorage):
    """
    Media storage using the Cloudinary upload HTTP API.

    Handles have the form ``<resource_type>/<public_id>`` because Cloudinary
    needs the resource type to destroy an asset.
    """

    name = "cloudinary"

    _API_URL = "https://api.cloudinary.com/v1_1"
    _DELIVERY_URL = "https://res.cloudinary.com"
    _SUCCESS_CODE = 200
    _NOT_FOUND_CODE = 404
    _TIMEOUT = 60  # seconds; uploads can be large
    _DEFAULT_FOLDER = "photographer-portfolio"

    def __init__(self, folder: str = "") -> None:
        self.cloud_name = os.getenv("CLOUDINARY_CLOUD_NAME")
        self.api_key = os.getenv("CLOUDINARY_API_KEY")
        self.api_secret = os.getenv("CLOUDINARY_API_SECRET")
        self.folder = folder or os.getenv("CLOUDINARY_FOLDER", self._DEFAULT_FOLDER)

    def _require_credentials(self) -> None:
        if not all([self.cloud_name, self.api_key, self.api_secret]):
            error_message = "Cloudinary credentials are not set"
            raise CloudinaryStorageError(error_message)

    def _signed(self, params: dict[str, str]) -> dict[str, str]:
        """
        Add timestamp, api_key and signature to API call parameters.
        """
        params = {**params, "timestamp": str(int(time.time()))}
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        signature = hashlib.sha1(
            f"{to_sign}{self.api_secret}".encode(), usedforsecurity=False
        ).hexdigest()
        return {**params, "api_key": self.api_key or "", "signature": signature}

    @staticmethod
    def _split_handle(handle: str) -> tuple[str, str]:
        resource_type, _, public_id = handle.partition("/")
        if resource_type not in ("image", "video") or not public_id:
            error_message = f"Invalid Cloudinary handle: {handle}"
            raise MediaNotFoundError(error_message)
        return resource_type, public_id

    def save(self, upload: MediaUpload) -> StoredMedia:
        self._require_credentials()
        resource_type = "video" if upload.is_video else "image"
        public_id = PurePosixPath(make_handle(upload.filename)).stem
        url = f"{self._API_URL}/{self.cloud_name}/{resource_type}/upload"
        data = self._signed({"folder": self.folder, "public_id": public_id})
        files = {"file": (upload.filename, upload.data, upload.content_type)}
        try:
            resp = requests.post(url, data=data, files=files, timeout=self._TIMEOUT)
        except requests.RequestException as exc:
            error_message = f"Cloudinary API request failed: {exc}"
            raise CloudinaryStorageError(error_message) from exc
        if resp.status_code != self._SUCCESS_CODE:
            error_message = f"Cloudinary API error: {resp.status_code} {resp.text}"
            raise CloudinaryStorageError(error_message)
        result = resp.json()
        secure_url = result.get("secure_url")
        stored_id = result.get("public_id")
        if not secure_url or not stored_id:
            error_message = "Cloudinary upload response is missing secure_url or public_id"
            raise CloudinaryStorageError(error_message)
        logger.info("Uploaded %d bytes to Cloudinary as %s", upload.size, stored_id)
        return StoredMedia(locator=secure_url, handle=f"{resource_type}/{stored_id}")

    def load(self, handle: str) -> bytes:
        resource_type, public_id = self._split_handle(handle)
        url = f"{self._DELIVERY_URL}/{self.cloud_name}/{resource_type}/upload/{public_id}"
        try:
            resp = requests.get(url, timeout=self._TIMEOUT)
        except requests.RequestException as exc:
            error_message = f"Cloudinary delivery request failed: {exc}"
            raise CloudinaryStorageError(error_message) from exc
        if resp.status_code == self._NOT_FOUND_CODE:
            error_message = f"Media not found: {handle}"
            raise MediaNotFoundError(error_message)
        if resp.status_code != self._SUCCESS_CODE:
            error_message = f"Cloudinary delivery error: {resp.status_code} {resp.text}"
            raise CloudinaryStorageError(error_message)
        return resp.content

    def delete(self, handle: str) -> None:
        self._require_credentials()
        resource_type, public_id = self._split_handle(handle)
        url = f"{self._API_URL}/{self.cloud_name}/{resource_type}/destroy"
        data = self._signed({"public_id": public_id})
        try:
            resp = requests.post(url, data=data, timeout=self._TIMEOUT)
        except requests.RequestException as exc:
            error_message = f"Cloudinary API request failed: {exc}"
            raise CloudinaryStorageError(error_message) from exc
        if resp.status_code != self._SUCCESS_CODE:
            error_message = f"Cloudinary API error: {resp.status_code} {resp.text}"
            raise CloudinaryStorageError(error_message)
        result = resp.json().get("result")
        # "not found" means the asset is already gone
        if result not in ("ok", "not found"):
            error_message = f"Cloudinary destroy failed: {result}"
            raise CloudinaryStorageError(error_message)
        logger.info("Deleted Cloudinary asset %s (%s)", public_id, result)
