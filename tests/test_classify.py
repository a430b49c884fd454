import pytest

from libs.core.exceptions import UnsupportedMediaError, UntrustedUrlError
from libs.core.models import MediaKind
from libs.usecases.classify import is_trusted_host, kind_from_file, kind_from_url

TRUSTED = ("cloudinary.com",)


def test_mime_prefix_wins_over_extension() -> None:
    assert kind_from_file("video/quicktime", "holiday.jpg") is MediaKind.VIDEO
    assert kind_from_file("image/heic", "clip.mp4") is MediaKind.PHOTO


@pytest.mark.parametrize(
    "name, kind",
    [
        ("IMG_0001.JPG", MediaKind.PHOTO),
        ("scan.webp", MediaKind.PHOTO),
        ("party.MOV", MediaKind.VIDEO),
        ("first-dance.mkv", MediaKind.VIDEO),
    ],
)
def test_extension_fallback(name: str, kind: MediaKind) -> None:
    assert kind_from_file("application/octet-stream", name) is kind


@pytest.mark.parametrize("mime, name", [(None, "notes.pdf"), ("application/zip", None), (None, "README")])
def test_unrecognised_documents_are_rejected(mime, name) -> None:
    with pytest.raises(UnsupportedMediaError):
        kind_from_file(mime, name)


def test_cloudinary_video_and_photo_urls() -> None:
    base = "https://res.cloudinary.com/demo"
    assert kind_from_url(f"{base}/upload/v1/clip.mp4", TRUSTED) is MediaKind.VIDEO
    assert kind_from_url(f"{base}/video/upload/v1/clip", TRUSTED) is MediaKind.VIDEO
    assert kind_from_url(f"{base}/upload/v1/cake.jpg", TRUSTED) is MediaKind.PHOTO


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/clip.mp4",
        "https://evil-cloudinary.com/cake.jpg",
        "https://res.cloudinary.com.attacker.net/cake.jpg",
        "ftp://res.cloudinary.com/cake.jpg",
        "http//broken",
        "https://[::1",
        "http://[res.cloudinary.com/x.jpg",
    ],
)
def test_untrusted_urls_are_rejected(url: str) -> None:
    with pytest.raises(UntrustedUrlError):
        kind_from_url(url, TRUSTED)


def test_trusted_host_matching() -> None:
    assert is_trusted_host("cloudinary.com", TRUSTED)
    assert is_trusted_host("RES.Cloudinary.com", TRUSTED)
    assert not is_trusted_host("notcloudinary.com", TRUSTED)
    assert not is_trusted_host("res.cloudinary.com", ())
