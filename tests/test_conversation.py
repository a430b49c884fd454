import asyncio

from libs.core.inbound import PhotoCandidate, UrlCandidate
from libs.core.models import MediaKind, Phase, UploadCounters


def test_begin_then_finish_yields_empty_gallery(services, store) -> None:
    tracker = services.tracker

    async def scenario():
        event_id = await tracker.begin(1)
        finished = await tracker.finish(1)
        return event_id, finished

    event_id, finished = asyncio.run(scenario())

    assert finished.event.id == event_id
    assert finished.event.media == []
    assert finished.event.title == "Event Gallery"
    assert finished.counters is None
    assert 1 not in store.states


def test_event_ids_are_unique_and_time_based(services) -> None:
    async def scenario():
        return [await services.tracker.begin(chat) for chat in range(20)]

    ids = asyncio.run(scenario())
    assert len(set(ids)) == 20
    assert all(i.startswith("event-") for i in ids)


def test_phases_only_move_forward(services, store) -> None:
    tracker = services.tracker

    async def scenario():
        await tracker.begin(7)
        first = await tracker.advance(7, "Title")
        second = await tracker.advance(7, "Description")
        third = await tracker.advance(7, "Ignored")
        state = await tracker.current(7)
        event = await store.get_event(state.event_id)
        return first, second, third, state, event

    first, second, third, state, event = asyncio.run(scenario())

    assert first is Phase.AWAITING_DESCRIPTION
    assert second is Phase.AWAITING_URLS
    assert third is None
    assert state.phase is Phase.AWAITING_URLS
    assert state.counters == UploadCounters(success=0, failed=0)
    assert event.title == "Title"
    assert event.description == "Description"


def test_transitions_without_state_are_noops(services) -> None:
    tracker = services.tracker

    async def scenario():
        return (
            await tracker.advance(99, "text"),
            await tracker.ingest(99, PhotoCandidate("f1")),
            await tracker.finish(99),
            await tracker.finish(99),
        )

    assert asyncio.run(scenario()) == (None, None, None, None)


def test_ingest_before_media_phase_is_ignored(services, store) -> None:
    tracker = services.tracker

    async def scenario():
        event_id = await tracker.begin(3)
        outcome = await tracker.ingest(3, PhotoCandidate("early"))
        return outcome, await store.get_event(event_id), await tracker.current(3)

    outcome, event, state = asyncio.run(scenario())
    assert outcome is None
    assert event.media == []
    assert state.phase is Phase.AWAITING_TITLE


def test_restart_replaces_live_event(services) -> None:
    tracker = services.tracker

    async def scenario():
        first = await tracker.begin(5)
        await tracker.advance(5, "Old")
        second = await tracker.begin(5)
        return first, second, await tracker.current(5)

    first, second, state = asyncio.run(scenario())
    assert first != second
    assert state.event_id == second
    assert state.phase is Phase.AWAITING_TITLE


def test_wedding_scenario(services, store) -> None:
    tracker = services.tracker

    async def scenario():
        await tracker.begin(1)
        await tracker.advance(1, "My Wedding")
        await tracker.advance(1, "June 2024")
        outcome = await tracker.ingest(1, PhotoCandidate("photo-1"))
        finished = await tracker.finish(1)
        return outcome, finished

    outcome, finished = asyncio.run(scenario())

    assert outcome.accepted
    event = finished.event
    assert event.title == "My Wedding"
    assert event.description == "June 2024"
    assert [m.kind for m in event.media] == [MediaKind.PHOTO]
    assert finished.counters == UploadCounters(success=1, failed=0)
    assert 1 not in store.states


def test_chats_are_independent(services) -> None:
    tracker = services.tracker

    async def scenario():
        await tracker.begin(1)
        await tracker.begin(2)
        await tracker.advance(1, "One")
        await tracker.advance(1, "Desc")
        await tracker.ingest(1, UrlCandidate("https://res.cloudinary.com/x/a.jpg"))
        return await tracker.current(1), await tracker.current(2)

    one, two = asyncio.run(scenario())
    assert one.phase is Phase.AWAITING_URLS
    assert one.counters.success == 1
    assert two.phase is Phase.AWAITING_TITLE
    assert two.counters is None
