"""Media upload backends and the factory choosing between them."""

from __future__ import annotations

from libs.core.settings import Settings
from libs.tg.files import FileSource

from .base import MediaUploader, PendingUpload
from .cloudinary import CloudinaryUploader
from .gdrive import DriveUploader
from .proxy import ProxyUploader
from .telegram_link import TelegramLinkUploader


def build_uploader(settings: Settings, files: FileSource) -> MediaUploader:
    """Return the uploader selected by ``settings.uploader_backend``."""
    backend = settings.uploader_backend
    if backend == "cloudinary":
        return CloudinaryUploader(
            settings.cloudinary_cloud_name,
            settings.cloudinary_api_key,
            settings.cloudinary_api_secret,
            folder=settings.cloudinary_folder,
            timeout=settings.upload_timeout,
        )
    if backend == "gdrive":
        return DriveUploader(
            settings.gdrive_access_token,
            folder_id=settings.gdrive_folder_id,
            timeout=settings.upload_timeout,
        )
    if backend == "proxy":
        return ProxyUploader(settings.public_url)
    return TelegramLinkUploader(files)


__all__ = [
    "MediaUploader",
    "PendingUpload",
    "CloudinaryUploader",
    "DriveUploader",
    "TelegramLinkUploader",
    "ProxyUploader",
    "build_uploader",
]
