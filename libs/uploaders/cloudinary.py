from __future__ import annotations

import asyncio
import io
import logging
from typing import Any, Callable, Dict, Optional

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from libs.core.exceptions import UploadError
from libs.core.models import MediaKind

from .base import MediaUploader, PendingUpload

# Incoming transformations: best quality, images in the best format the
# client supports and videos normalised to mp4.
_TRANSFORMATIONS: Dict[MediaKind, Dict[str, str]] = {
    MediaKind.PHOTO: {"quality": "auto:best", "fetch_format": "auto"},
    MediaKind.VIDEO: {"quality": "auto:best", "fetch_format": "mp4"},
}


class CloudinaryUploader(MediaUploader):
    """Signed uploads through the Cloudinary SDK.

    The SDK is blocking, so every upload runs in a worker thread.
    """

    name = "cloudinary"

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        *,
        folder: str = "event-media",
        timeout: float = 60.0,
        upload: Optional[Callable[..., Any]] = None,
    ) -> None:
        if not (cloud_name and api_key and api_secret):
            raise ValueError("Cloudinary credentials are not configured")
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        self.folder = folder
        self.timeout = timeout
        self._upload = upload or cloudinary.uploader.upload
        self.logger = logging.getLogger(__name__)

    def _options(self, upload: PendingUpload) -> Dict[str, Any]:
        return {
            "resource_type": "video" if upload.kind is MediaKind.VIDEO else "image",
            "folder": self.folder,
            "unique_filename": True,
            "overwrite": False,
            "timeout": self.timeout,
            **_TRANSFORMATIONS[upload.kind],
        }

    async def store(self, upload: PendingUpload) -> str:
        data = await upload.read()
        try:
            res = await asyncio.to_thread(
                self._upload, io.BytesIO(data), **self._options(upload)
            )
        except CloudinaryError as exc:
            raise UploadError(f"Cloudinary upload failed: {exc}") from exc
        secure_url = res.get("secure_url") if isinstance(res, dict) else None
        if not secure_url:
            raise UploadError(f"Cloudinary response lacks secure_url: {res!r:.200}")
        self.logger.debug("Uploaded %s to %s", upload.file_id, secure_url)
        return secure_url


__all__ = ["CloudinaryUploader"]
