"""Forget channel use case - drop all knowledge of a channel the bot left."""

import logging

from slackrag.application.use_cases.knowledge.content_store import ContentStore

logger = logging.getLogger(__name__)


class ForgetChannelUseCase:
    """Unconditional, irreversible channel-wide delete."""

    def __init__(self, content_store: ContentStore) -> None:
        self._content_store = content_store

    async def execute(self, channel_id: str) -> int:
        deleted = await self._content_store.delete_channel(channel_id)
        logger.info("Forgot channel %s (%d chunks)", channel_id, deleted)
        return deleted
