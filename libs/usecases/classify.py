"""Decide whether an attachment or pasted link is a photo or a video."""

from __future__ import annotations

from typing import Iterable, Optional
from urllib.parse import urlsplit

from libs.core.exceptions import UnsupportedMediaError, UntrustedUrlError
from libs.core.models import MediaKind

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp"})
VIDEO_EXTENSIONS = frozenset({"mp4", "mov", "avi", "mkv", "webm"})
VIDEO_URL_MARKERS = ("/video/", ".mp4", ".mov")


def kind_from_file(mime_type: Optional[str], file_name: Optional[str]) -> MediaKind:
    """Classify a document by MIME prefix, falling back to its extension."""
    mime = (mime_type or "").lower()
    if mime.startswith("image/"):
        return MediaKind.PHOTO
    if mime.startswith("video/"):
        return MediaKind.VIDEO
    if file_name and "." in file_name:
        ext = file_name.rsplit(".", 1)[1].lower()
        if ext in IMAGE_EXTENSIONS:
            return MediaKind.PHOTO
        if ext in VIDEO_EXTENSIONS:
            return MediaKind.VIDEO
    raise UnsupportedMediaError(
        f"Unsupported file type (mime={mime_type!r}, name={file_name!r})"
    )


def is_trusted_host(host: str, trusted_hosts: Iterable[str]) -> bool:
    host = host.lower().rstrip(".")
    for trusted in trusted_hosts:
        trusted = trusted.lower().strip(".")
        if trusted and (host == trusted or host.endswith("." + trusted)):
            return True
    return False


def kind_from_url(url: str, trusted_hosts: Iterable[str]) -> MediaKind:
    """Accept only http(s) links on a trusted host and infer the kind from the path."""
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname or ""
    except ValueError as exc:
        # e.g. an unbalanced "[" in the host part
        raise UntrustedUrlError(f"Malformed URL {url!r}") from exc
    if parts.scheme not in ("http", "https") or not is_trusted_host(host, trusted_hosts):
        raise UntrustedUrlError(f"URL host {host or url!r} is not allowed")
    path = parts.path.lower()
    if any(marker in path for marker in VIDEO_URL_MARKERS):
        return MediaKind.VIDEO
    return MediaKind.PHOTO


__all__ = [
    "IMAGE_EXTENSIONS",
    "VIDEO_EXTENSIONS",
    "kind_from_file",
    "kind_from_url",
    "is_trusted_host",
]
