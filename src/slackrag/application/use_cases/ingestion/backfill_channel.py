"""Backfill channel use case - learn a channel's history when the bot joins."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from slackrag.application.ports import ChatPlatform
from slackrag.application.use_cases.ingestion.ingest_message import IngestMessageUseCase
from slackrag.domain.entities import InboundEvent
from slackrag.domain.exceptions import ChatPlatformError

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "Yay! I'm now in the channel! I will start learning from everything shared in this channel!"
)
DONE_MESSAGE = "OK! I have learnt all there is to learn from this channel! Ask me anything by tagging me!"


class BackfillChannelUseCase:
    """Page through channel history, ingesting each message.

    Pages are fully ingested before the next is fetched, with a cooldown in
    between; at most max_messages are processed.
    """

    def __init__(
        self,
        chat: ChatPlatform,
        ingest: IngestMessageUseCase,
        page_size: int = 100,
        max_messages: int = 500,
        cooldown_seconds: float = 60.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._chat = chat
        self._ingest = ingest
        self._page_size = page_size
        self._max_messages = max_messages
        self._cooldown_seconds = cooldown_seconds
        self._sleep = sleep

    async def _announce(self, channel_id: str, text: str) -> None:
        try:
            await self._chat.post_message(channel_id, text)
        except ChatPlatformError as e:
            logger.warning("Could not post backfill notice in %s: %s", channel_id, e)

    async def execute(self, channel_id: str) -> int:
        """Backfill channel_id. Returns number of history messages processed."""
        await self._announce(channel_id, WELCOME_MESSAGE)
        processed = 0
        cursor: str | None = None
        while processed < self._max_messages:
            page = await self._chat.get_channel_history(
                channel_id, cursor=cursor, limit=self._page_size
            )
            for message in page.messages:
                if processed >= self._max_messages:
                    break
                processed += 1
                if message.is_bot:
                    continue
                try:
                    await self._ingest.execute(InboundEvent.from_message(message, channel_id))
                except Exception:
                    logger.exception("Error processing history message %s", message.ts)
            cursor = page.next_cursor
            if not cursor or processed >= self._max_messages:
                break
            await self._sleep(self._cooldown_seconds)

        logger.info("Processed %d historical messages in %s", processed, channel_id)
        await self._announce(channel_id, DONE_MESSAGE)
        return processed
