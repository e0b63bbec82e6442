"""Event dispatcher - routes inbound events to use cases."""

import logging

from slackrag.application.ports import ChatPlatform
from slackrag.application.use_cases.answer.answer_mention import AnswerMentionUseCase
from slackrag.application.use_cases.ingestion.backfill_channel import BackfillChannelUseCase
from slackrag.application.use_cases.ingestion.ingest_message import IngestMessageUseCase
from slackrag.application.use_cases.retention.forget_channel import ForgetChannelUseCase
from slackrag.domain.entities import InboundEvent
from slackrag.domain.exceptions import ChatPlatformError
from slackrag.domain.value_objects import EventType

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Top-level event handler. Never raises: one bad event must not stop the next."""

    def __init__(
        self,
        chat: ChatPlatform,
        ingest: IngestMessageUseCase,
        answer: AnswerMentionUseCase,
        backfill: BackfillChannelUseCase,
        forget: ForgetChannelUseCase,
        bot_user_id: str | None = None,
    ) -> None:
        self._chat = chat
        self._ingest = ingest
        self._answer = answer
        self._backfill = backfill
        self._forget = forget
        self._bot_user_id = bot_user_id

    def _is_self(self, event: InboundEvent) -> bool:
        bot_id = event.bot_user_id or self._bot_user_id
        return bool(bot_id) and event.user_id == bot_id

    async def dispatch(self, event: InboundEvent) -> None:
        logger.info("Processing %s event in %s", event.type, event.channel_id)
        try:
            await self._route(event)
        except Exception:
            logger.exception("Error handling %s event in %s", event.type, event.channel_id)

    async def _route(self, event: InboundEvent) -> None:
        if event.type == EventType.MEMBER_JOINED:
            # group_joined carries no user: it is always the bot itself.
            if event.raw_type == "group_joined" or self._is_self(event):
                await self._backfill.execute(event.channel_id)
        elif event.type == EventType.MEMBER_LEFT:
            # member_left_channel fires for anyone; only the bot's own removal forgets.
            if event.raw_type != "member_left_channel" or self._is_self(event):
                await self._forget.execute(event.channel_id)
        elif event.type == EventType.MENTION:
            await self._answer.execute(event)
        else:
            await self._on_message(event)

    async def _on_message(self, event: InboundEvent) -> None:
        if self._is_self(event):
            return
        outcome = await self._ingest.execute(event)
        if outcome.document is None:
            return
        results = outcome.document.link_results
        if results and all(r.ok for r in results):
            try:
                await self._chat.add_reaction(event.channel_id, event.ts or "", "notebook")
            except ChatPlatformError as e:
                logger.warning("Error adding notebook reaction: %s", e)
