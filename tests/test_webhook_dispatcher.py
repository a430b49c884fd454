import asyncio
from urllib.parse import parse_qs, urlsplit

from libs.core.inbound import DocumentCandidate, InboundMessage, PhotoCandidate
from libs.core.models import Phase

CHAT = 1001


def _send(dispatcher, text: str = "", attachment=None, lang: str = "en") -> None:
    msg = InboundMessage(chat_id=CHAT, text=text, language_code=lang, attachment=attachment)
    asyncio.run(dispatcher.handle(msg))


def _walk_to_media_phase(dispatcher) -> None:
    _send(dispatcher, "/start")
    _send(dispatcher, "My Wedding")
    _send(dispatcher, "June 2024")


def test_full_conversation_replies(services, notifier) -> None:
    dispatcher = services.dispatcher

    _walk_to_media_phase(dispatcher)
    _send(dispatcher, attachment=PhotoCandidate("p1"))
    _send(dispatcher, "/done")

    texts = notifier.texts(CHAT)
    assert texts[0].startswith("🎉 New event created!")
    assert 'Title set: "My Wedding"' in texts[1]
    assert texts[2].startswith("✅ Description set!")
    assert "Final Upload Summary" in texts[3]
    assert "Successful: 1" in texts[3] and "Failed: 0" in texts[3]
    assert 'Your event "My Wedding" is ready!' in texts[4]
    assert len(texts) == 5
    assert asyncio.run(services.tracker.current(CHAT)) is None


def test_share_link_carries_event_fields(services, notifier) -> None:
    dispatcher = services.dispatcher
    _walk_to_media_phase(dispatcher)
    event_id = asyncio.run(services.tracker.current(CHAT)).event_id

    _send(dispatcher, "/done")

    link = notifier.texts(CHAT)[-1].split("Share: ", 1)[1]
    parts = urlsplit(link)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == "https://gallery.example.com/"
    query = parse_qs(parts.query)
    assert query == {"event": [event_id], "title": ["My Wedding"], "description": ["June 2024"]}
    assert "%20" in parts.query


def test_done_before_media_phase_has_no_summary(services, notifier) -> None:
    dispatcher = services.dispatcher
    _send(dispatcher, "/start")
    _send(dispatcher, "/done")

    texts = notifier.texts(CHAT)
    assert len(texts) == 2
    assert 'Your event "Event Gallery" is ready!' in texts[1]


def test_progress_summary_every_five_items(services, notifier, uploader) -> None:
    dispatcher = services.dispatcher
    _walk_to_media_phase(dispatcher)
    uploader.failing.add("p3")
    before = len(notifier.sent)

    for i in range(1, 11):
        _send(dispatcher, attachment=PhotoCandidate(f"p{i}"))

    progress = [t for t in notifier.texts(CHAT)[before:] if "Upload Progress" in t]
    assert len(progress) == 2
    assert "Successful: 4" in progress[0] and "Failed: 1" in progress[0]
    assert "Successful: 9" in progress[1] and "Failed: 1" in progress[1]
    assert len(notifier.sent) - before == 2


def test_failures_are_silent_by_default(services, notifier) -> None:
    dispatcher = services.dispatcher
    _walk_to_media_phase(dispatcher)
    before = len(notifier.sent)

    _send(dispatcher, "https://example.com/not-trusted.jpg")
    _send(dispatcher, attachment=DocumentCandidate("d1", "application/pdf", "x.pdf"))

    assert len(notifier.sent) == before
    state = asyncio.run(services.tracker.current(CHAT))
    assert state.counters.failed == 2


def test_per_item_failure_notice(services, notifier) -> None:
    dispatcher = services.dispatcher
    dispatcher.failure_notice = "per_item"
    _walk_to_media_phase(dispatcher)

    _send(dispatcher, "https://example.com/not-trusted.jpg")

    assert notifier.texts(CHAT)[-1].startswith("⚠️ Could not add this item")


def test_out_of_phase_input_is_ignored(services, notifier) -> None:
    dispatcher = services.dispatcher

    _send(dispatcher, "hello")
    _send(dispatcher, "/done")
    _send(dispatcher, "/start")
    _send(dispatcher, attachment=PhotoCandidate("too-early"))
    _send(dispatcher, "/help")

    assert len(notifier.sent) == 1
    state = asyncio.run(services.tracker.current(CHAT))
    assert state.phase is Phase.AWAITING_TITLE


def test_out_of_phase_input_is_explained_when_rejecting(services, notifier) -> None:
    dispatcher = services.dispatcher
    dispatcher.out_of_phase = "reject"

    _send(dispatcher, "hello")
    _send(dispatcher, "/start")
    _send(dispatcher, attachment=PhotoCandidate("too-early"))
    _send(dispatcher, "Title")
    _send(dispatcher, "Description")
    _send(dispatcher, "just chatting")

    texts = notifier.texts(CHAT)
    assert texts[0] == "Send /start to create a new event gallery."
    assert texts[2] == "Please send the title for your event as a text message."
    assert texts[-1].startswith("Send photos, videos, documents or cloud links.")


def test_replies_follow_user_language(services, notifier) -> None:
    _send(services.dispatcher, "/start", lang="ru-RU")

    assert notifier.texts(CHAT)[0].startswith("🎉 Новое событие создано!")


def test_undelivered_replies_do_not_break_the_flow(services, notifier) -> None:
    notifier.deliver = False
    _walk_to_media_phase(services.dispatcher)

    state = asyncio.run(services.tracker.current(CHAT))
    assert state.phase is Phase.AWAITING_URLS


def test_malformed_link_is_counted_in_final_summary(services, notifier) -> None:
    dispatcher = services.dispatcher
    _walk_to_media_phase(dispatcher)

    _send(dispatcher, "https://[::1")
    _send(dispatcher, "/done")

    summary = notifier.texts(CHAT)[-2]
    assert "Successful: 0" in summary and "Failed: 1" in summary


def test_title_and_description_are_stored_as_typed(services) -> None:
    dispatcher = services.dispatcher
    _send(dispatcher, "/start")
    event_id = asyncio.run(services.tracker.current(CHAT)).event_id

    _send(dispatcher, "  Anna & Tom  ")
    _send(dispatcher, "Line one\nline two\n")

    event = asyncio.run(services.store.get_event(event_id))
    assert event.title == "  Anna & Tom  "
    assert event.description == "Line one\nline two\n"


def test_blank_title_is_out_of_phase(services) -> None:
    dispatcher = services.dispatcher
    _send(dispatcher, "/start")

    _send(dispatcher, "   ")

    assert asyncio.run(services.tracker.current(CHAT)).phase is Phase.AWAITING_TITLE
