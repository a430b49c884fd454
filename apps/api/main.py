from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, AsyncIterator, Dict

import httpx
from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from libs.core.exceptions import NotFoundError, StorageError, UploadError
from libs.core.settings import get_settings
from libs.logging import setup_logging
from libs.services import Services, build_services
from libs.storage.sql import SqlGalleryStore
from libs.tg import FileSource, parse_update
from libs.usecases import GetEvent, WebhookDispatcher

logger = logging.getLogger(__name__)

_STARTED_AT = time.monotonic()


# ---------------------------------------------------------------------------
# Dependency factories


@lru_cache
def get_services() -> Services:
    return build_services(get_settings())


def get_dispatcher(services: Services = Depends(get_services)) -> WebhookDispatcher:
    return services.dispatcher


def get_event_uc(services: Services = Depends(get_services)) -> GetEvent:
    return services.get_event


def get_files(services: Services = Depends(get_services)) -> FileSource:
    return services.files


def get_proxy_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=get_settings().upload_timeout, follow_redirects=True)


# ---------------------------------------------------------------------------
# FastAPI application


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    settings = get_settings()
    if settings.storage_backend == "sql":
        store = get_services().store
        if isinstance(store, SqlGalleryStore):
            await store.db.init()
    yield
    if get_services.cache_info().currsize:
        await get_services().aclose()
        get_services.cache_clear()


app = FastAPI(title="Event Gallery API", lifespan=lifespan)
# The gallery frontend is served from a different origin
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["GET"])


# Routes ---------------------------------------------------------------------


@app.post("/telegram/webhook/{secret}")
async def telegram_webhook(
    secret: str,
    payload: Dict[str, Any],
    dispatcher: WebhookDispatcher = Depends(get_dispatcher),
) -> Dict[str, str]:
    settings = get_settings()
    expected = settings.telegram_webhook_secret
    if expected and secret != expected:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid secret")

    # Telegram retries any non-2xx answer, so errors end here
    try:
        msg = parse_update(payload)
    except Exception:
        logger.exception("Malformed update", extra={"update_id": payload.get("update_id")})
        return {"status": "ignored"}
    if msg is None:
        return {"status": "ignored"}

    try:
        await dispatcher.handle(msg)
    except Exception:
        logger.exception("Webhook processing failed", extra={"chat_id": msg.chat_id})
    return {"status": "ok"}


@app.get("/api/event/{event_id}")
async def get_event(event_id: str, uc: GetEvent = Depends(get_event_uc)) -> Dict[str, Any]:
    try:
        return await uc(event_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    except StorageError:
        logger.exception("Event read failed", extra={"event_id": event_id})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Database error"
        )


@app.get("/api/media/{file_id}")
async def media_proxy(
    file_id: str,
    files: FileSource = Depends(get_files),
    client: httpx.AsyncClient = Depends(get_proxy_client),
) -> StreamingResponse:
    """Stream a chat attachment straight from Telegram."""
    try:
        link = await files.get_file_link(file_id)
        upstream = await client.send(client.build_request("GET", link), stream=True)
    except NotFoundError:
        await client.aclose()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    except (UploadError, httpx.HTTPError) as exc:
        await client.aclose()
        logger.warning("Media proxy failed: %s", exc, extra={"file_id": file_id})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Upstream error")

    if upstream.status_code >= 400:
        await upstream.aclose()
        await client.aclose()
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Upstream error")

    async def _close() -> None:
        await upstream.aclose()
        await client.aclose()

    return StreamingResponse(
        upstream.aiter_bytes(),
        media_type=upstream.headers.get("content-type", "application/octet-stream"),
        background=BackgroundTask(_close),
    )


@app.get("/health")
def health() -> Dict[str, Any]:
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "storage": get_settings().storage_backend,
    }


@app.get("/")
def root() -> Dict[str, Any]:
    return {
        "status": "OK",
        "message": "Server is running",
        "pingEndpoint": "/health",
        "storage": get_settings().storage_backend,
    }


__all__ = ["app"]
