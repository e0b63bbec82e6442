"""Unit tests for BackfillChannelUseCase."""

from unittest.mock import AsyncMock

import pytest

from slackrag.application.use_cases.ingestion.backfill_channel import (
    DONE_MESSAGE,
    WELCOME_MESSAGE,
    BackfillChannelUseCase,
)
from slackrag.domain.entities import ChatMessage, HistoryPage
from slackrag.domain.exceptions import ChatPlatformError

from tests.conftest import FakeChatPlatform


def _page(start: int, count: int, next_cursor: str | None = None, bot_every: int = 0) -> HistoryPage:
    return HistoryPage(
        messages=[
            ChatMessage(
                ts=f"{i}.0",
                text=f"message {i}",
                user="U1",
                is_bot=bool(bot_every) and i % bot_every == 0,
            )
            for i in range(start, start + count)
        ],
        next_cursor=next_cursor,
    )


def _use_case(chat: FakeChatPlatform, ingest, sleeps: list[float], **kwargs) -> BackfillChannelUseCase:
    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return BackfillChannelUseCase(chat=chat, ingest=ingest, sleep=_sleep, **kwargs)


@pytest.mark.asyncio
async def test_backfill_pages_with_cooldown(chat: FakeChatPlatform) -> None:
    chat.history = [_page(1, 3, "cursor-2"), _page(4, 2)]
    ingest = AsyncMock()
    sleeps: list[float] = []

    processed = await _use_case(chat, ingest, sleeps, cooldown_seconds=60.0).execute("C1")

    assert processed == 5
    assert ingest.execute.await_count == 5
    assert chat.history_cursors == [None, "cursor-2"]
    assert sleeps == [60.0]
    assert [p["text"] for p in chat.posted] == [WELCOME_MESSAGE, DONE_MESSAGE]


@pytest.mark.asyncio
async def test_backfill_stops_at_message_cap(chat: FakeChatPlatform) -> None:
    chat.history = [_page(1, 3, "c2"), _page(4, 3, "c3"), _page(7, 3)]
    ingest = AsyncMock()
    sleeps: list[float] = []

    processed = await _use_case(chat, ingest, sleeps, max_messages=4).execute("C1")

    assert processed == 4
    assert ingest.execute.await_count == 4
    assert len(chat.history_cursors) == 2
    assert len(sleeps) == 1


@pytest.mark.asyncio
async def test_backfill_skips_bot_messages(chat: FakeChatPlatform) -> None:
    chat.history = [_page(1, 4, bot_every=2)]
    ingest = AsyncMock()

    processed = await _use_case(chat, ingest, []).execute("C1")

    assert processed == 4
    ingested = [call.args[0].ts for call in ingest.execute.await_args_list]
    assert ingested == ["1.0", "3.0"]


@pytest.mark.asyncio
async def test_backfill_isolates_failing_messages(chat: FakeChatPlatform) -> None:
    chat.history = [_page(1, 3)]
    ingest = AsyncMock()
    ingest.execute.side_effect = [None, RuntimeError("boom"), None]

    processed = await _use_case(chat, ingest, []).execute("C1")

    assert processed == 3
    assert ingest.execute.await_count == 3
    assert chat.posted[-1]["text"] == DONE_MESSAGE


@pytest.mark.asyncio
async def test_backfill_events_carry_channel(chat: FakeChatPlatform) -> None:
    chat.history = [_page(1, 1)]
    ingest = AsyncMock()

    await _use_case(chat, ingest, []).execute("C42")

    event = ingest.execute.await_args.args[0]
    assert event.channel_id == "C42"
    assert event.text == "message 1"


@pytest.mark.asyncio
async def test_backfill_survives_failed_notices(chat: FakeChatPlatform) -> None:
    chat.history = [_page(1, 2)]
    chat.post_message = AsyncMock(side_effect=ChatPlatformError("not_in_channel"))
    ingest = AsyncMock()

    processed = await _use_case(chat, ingest, []).execute("C1")

    assert processed == 2
    assert ingest.execute.await_count == 2
    assert chat.post_message.await_count == 2
