import asyncio

import pytest

from libs.core.exceptions import NotFoundError
from libs.core.models import Event, MediaItem, MediaKind, MediaSource
from libs.uploaders import TelegramLinkUploader
from libs.usecases import GetEvent


def _seed(store) -> None:
    event = Event(
        id="event-1",
        title="Graduation",
        description="Class of 2024",
        media=[
            MediaItem(kind=MediaKind.PHOTO, url="tg-file:AAA", source=MediaSource.TELEGRAM),
            MediaItem(
                kind=MediaKind.VIDEO,
                url="https://res.cloudinary.com/demo/video/upload/a.mp4",
                source=MediaSource.MANUAL,
            ),
            MediaItem(kind=MediaKind.PHOTO, url="tg-file:GONE", source=MediaSource.DOCUMENT),
        ],
    )
    asyncio.run(store.create_event(event))


def test_durable_links_are_returned_as_stored(store, uploader) -> None:
    _seed(store)

    body = asyncio.run(GetEvent(store, uploader)("event-1"))

    assert body["eventId"] == "event-1"
    assert body["title"] == "Graduation"
    assert body["description"] == "Class of 2024"
    assert [m["file_path"] for m in body["media"]][0] == "tg-file:AAA"
    assert set(body["media"][0]) == {"type", "file_path", "timestamp", "source"}


def test_expiring_links_are_refreshed_on_each_read(store, files) -> None:
    _seed(store)
    files.missing.add("GONE")
    get_event = GetEvent(store, TelegramLinkUploader(files))

    first = asyncio.run(get_event("event-1"))
    second = asyncio.run(get_event("event-1"))

    photo = first["media"][0]
    assert photo["file_path"].startswith("https://api.telegram.org/file/botTEST/AAA")
    assert photo["file_path"] != second["media"][0]["file_path"]
    assert first["media"][1]["file_path"] == "https://res.cloudinary.com/demo/video/upload/a.mp4"
    # unresolvable references are passed through rather than failing the read
    assert first["media"][2]["file_path"] == "tg-file:GONE"
    assert [m["type"] for m in first["media"]] == ["photo", "video", "photo"]


def test_unknown_event(store, uploader) -> None:
    with pytest.raises(NotFoundError):
        asyncio.run(GetEvent(store, uploader)("event-missing"))
