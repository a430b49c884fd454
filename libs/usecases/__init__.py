"""Application use cases: conversation flow, media ingestion and gallery reads."""

from .classify import kind_from_file, kind_from_url
from .conversation import ConversationTracker, FinishedEvent
from .gallery import GetEvent
from .ingest_media import IngestOutcome, MediaIngestor
from .webhook import WebhookDispatcher

__all__ = [
    "kind_from_file",
    "kind_from_url",
    "ConversationTracker",
    "FinishedEvent",
    "GetEvent",
    "IngestOutcome",
    "MediaIngestor",
    "WebhookDispatcher",
]
