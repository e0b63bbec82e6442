"""Chat platform port - the workspace the bot lives in."""

from typing import Any, Protocol

from slackrag.domain.entities import ChatChannel, ChatMessage, ChatUser, HistoryPage


class ChatPlatform(Protocol):
    """Port for reading conversations and replying."""

    async def get_user(self, user_id: str) -> ChatUser: ...

    async def get_channel(self, channel_id: str) -> ChatChannel: ...

    async def get_thread_replies(self, channel_id: str, thread_ts: str) -> list[ChatMessage]: ...

    async def get_channel_history(
        self, channel_id: str, cursor: str | None = None, limit: int = 100
    ) -> HistoryPage: ...

    async def post_message(
        self,
        channel_id: str,
        text: str,
        thread_ts: str | None = None,
        blocks: list[dict[str, Any]] | None = None,
    ) -> None: ...

    async def add_reaction(self, channel_id: str, timestamp: str, name: str) -> None: ...
