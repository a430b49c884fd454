from __future__ import annotations

import asyncio
import io
import logging
from typing import Any, Optional

from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build as google_build
from googleapiclient.errors import HttpError as GoogleHttpError
from googleapiclient.http import MediaIoBaseUpload

from libs.core.exceptions import UploadError
from libs.core.models import MediaKind

from .base import MediaUploader, PendingUpload

PUBLIC_URL = "https://drive.google.com/uc?export=view&id={file_id}"


class DriveUploader(MediaUploader):
    """Uploads to Google Drive and makes each file readable by anyone."""

    name = "gdrive"

    def __init__(
        self,
        access_token: str,
        *,
        folder_id: str = "",
        timeout: float = 60.0,
        service: Optional[Any] = None,
    ) -> None:
        if not access_token:
            raise ValueError("Google Drive access token is not configured")
        self.folder_id = folder_id
        self.timeout = timeout
        self._credentials = Credentials(token=access_token)
        self._service = service
        self.logger = logging.getLogger(__name__)

    def _build_service(self) -> Any:
        if self._service is None:
            self._service = google_build(
                "drive", "v3", credentials=self._credentials, cache_discovery=False
            )
        return self._service

    def _upload_sync(self, upload: PendingUpload, data: bytes) -> str:
        service = self._build_service()
        mime = upload.mime_type or (
            "video/mp4" if upload.kind is MediaKind.VIDEO else "image/jpeg"
        )
        metadata = {"name": upload.suggested_name}
        if self.folder_id:
            metadata["parents"] = [self.folder_id]
        created = (
            service.files()
            .create(
                body=metadata,
                media_body=MediaIoBaseUpload(io.BytesIO(data), mimetype=mime),
                fields="id",
            )
            .execute()
        )
        file_id = created["id"]
        service.permissions().create(
            fileId=file_id,
            body={"role": "reader", "type": "anyone"},
        ).execute()
        return file_id

    async def store(self, upload: PendingUpload) -> str:
        data = await upload.read()
        try:
            file_id = await asyncio.to_thread(self._upload_sync, upload, data)
        except (GoogleHttpError, GoogleAuthError) as exc:
            raise UploadError(f"Google Drive upload failed: {exc}") from exc
        except (KeyError, TypeError) as exc:
            raise UploadError("Google Drive returned an unexpected response") from exc
        self.logger.debug("Uploaded %s to Drive file %s", upload.file_id, file_id)
        return PUBLIC_URL.format(file_id=file_id)


__all__ = ["DriveUploader"]
