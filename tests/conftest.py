import sys
from pathlib import Path
from typing import Dict, List, Set, Tuple

import pytest

# Ensure project root on sys.path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from libs.core.exceptions import NotFoundError, UploadError
from libs.core.settings import Settings
from libs.services import Services, build_services
from libs.storage import MemoryGalleryStore
from libs.tg import FileSource, Notifier
from libs.uploaders import MediaUploader, PendingUpload


class FakeNotifier(Notifier):
    def __init__(self, deliver: bool = True) -> None:
        self.sent: List[Tuple[int, str]] = []
        self.deliver = deliver

    async def send(self, chat_id: int, text: str) -> bool:
        self.sent.append((chat_id, text))
        return self.deliver

    def texts(self, chat_id: int | None = None) -> List[str]:
        return [t for c, t in self.sent if chat_id is None or c == chat_id]


class FakeFiles(FileSource):
    """In-memory stand-in for the Bot API file endpoints."""

    def __init__(self) -> None:
        self.contents: Dict[str, bytes] = {}
        self.missing: Set[str] = set()
        self.link_calls = 0

    async def get_file_link(self, file_id: str) -> str:
        if file_id in self.missing:
            raise NotFoundError(file_id)
        self.link_calls += 1
        return f"https://api.telegram.org/file/botTEST/{file_id}?v={self.link_calls}"

    async def download(self, file_id: str) -> bytes:
        if file_id in self.missing:
            raise NotFoundError(file_id)
        return self.contents.get(file_id, f"bytes-of-{file_id}".encode())


class FakeUploader(MediaUploader):
    name = "fake"

    def __init__(self) -> None:
        self.failing: Set[str] = set()
        self.stored: List[PendingUpload] = []

    async def store(self, upload: PendingUpload) -> str:
        if upload.file_id in self.failing:
            raise UploadError(f"backend down for {upload.file_id}")
        await upload.read()
        self.stored.append(upload)
        return f"https://cdn.example.com/{upload.kind.value}/{upload.file_id}"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        telegram_bot_token="",
        telegram_webhook_secret="s3cret",
        frontend_url="https://gallery.example.com/",
        storage_backend="memory",
        uploader_backend="telegram",
    )


@pytest.fixture()
def store() -> MemoryGalleryStore:
    return MemoryGalleryStore()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def files() -> FakeFiles:
    return FakeFiles()


@pytest.fixture()
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture()
def services(settings, store, notifier, files, uploader) -> Services:
    return build_services(
        settings, store=store, files=files, notifier=notifier, uploader=uploader
    )


@pytest.fixture()
def client(monkeypatch, settings, services):
    """FastAPI test client wired to the in-memory services."""
    from fastapi.testclient import TestClient

    from apps.api import main

    monkeypatch.setattr(main, "get_settings", lambda: settings)
    main.app.dependency_overrides[main.get_services] = lambda: services
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()
