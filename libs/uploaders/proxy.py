from __future__ import annotations

from .base import MediaUploader, PendingUpload


class ProxyUploader(MediaUploader):
    """Serves files through this service's ``/api/media/<file_id>`` endpoint.

    Nothing is re-hosted: every read streams the file from Telegram again.
    """

    name = "proxy"

    def __init__(self, public_url: str = "") -> None:
        self.public_url = public_url.rstrip("/")

    async def store(self, upload: PendingUpload) -> str:
        return f"{self.public_url}/api/media/{upload.file_id}"


__all__ = ["ProxyUploader"]
