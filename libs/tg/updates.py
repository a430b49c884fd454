"""Translate Telegram updates into :class:`InboundMessage` objects."""

from __future__ import annotations

from typing import Any, Dict, Optional

from telegram import Bot, Message, Update

from libs.core.inbound import (
    DocumentCandidate,
    InboundMessage,
    MediaCandidate,
    PhotoCandidate,
    VideoCandidate,
)


def _attachment(msg: Message) -> Optional[MediaCandidate]:
    # Documents first: users send files to keep full quality
    if msg.document:
        return DocumentCandidate(
            file_id=msg.document.file_id,
            mime_type=msg.document.mime_type,
            file_name=msg.document.file_name,
        )
    if msg.photo:
        # PhotoSize entries are ordered from smallest to largest
        return PhotoCandidate(file_id=msg.photo[-1].file_id)
    if msg.video:
        return VideoCandidate(file_id=msg.video.file_id, mime_type=msg.video.mime_type)
    return None


def message_from_update(update: Optional[Update]) -> Optional[InboundMessage]:
    """Return the neutral message view, or ``None`` for non-message updates."""
    msg = update.message if update else None
    if msg is None:
        return None
    user = msg.from_user
    return InboundMessage(
        chat_id=msg.chat_id,
        text=msg.text or "",
        language_code=user.language_code if user else None,
        attachment=_attachment(msg),
    )


def parse_update(payload: Dict[str, Any], bot: Bot | None = None) -> Optional[InboundMessage]:
    """Parse a raw webhook body."""
    if not payload:
        return None
    return message_from_update(Update.de_json(payload, bot))


__all__ = ["message_from_update", "parse_update"]
