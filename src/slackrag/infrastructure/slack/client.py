"""Slack Web API adapter."""

import logging
from typing import Any

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from slackrag.domain.entities import ChatChannel, ChatMessage, ChatUser, HistoryPage
from slackrag.domain.exceptions import ChatPlatformError
from slackrag.infrastructure.slack.events import parse_files
from slackrag.infrastructure.slack.formatting import format_message_with_blocks

logger = logging.getLogger(__name__)


def _message(raw: dict[str, Any]) -> ChatMessage:
    return ChatMessage(
        ts=raw.get("ts", ""),
        text=raw.get("text") or "",
        user=raw.get("user"),
        thread_ts=raw.get("thread_ts"),
        is_bot=bool(raw.get("bot_id")) or raw.get("subtype") == "bot_message",
        files=parse_files(raw.get("files")),
    )


class SlackChatPlatform:
    """ChatPlatform on top of slack_sdk's AsyncWebClient."""

    def __init__(self, client: AsyncWebClient) -> None:
        self._client = client

    async def get_user(self, user_id: str) -> ChatUser:
        try:
            response = await self._client.users_info(user=user_id)
        except SlackApiError as e:
            raise ChatPlatformError(f"users.info failed: {e.response.get('error')}") from e
        user = response.get("user") or {}
        profile = user.get("profile") or {}
        return ChatUser(
            id=user_id,
            name=user.get("real_name") or user.get("name") or user_id,
            title=profile.get("title") or "No title",
        )

    async def get_channel(self, channel_id: str) -> ChatChannel:
        try:
            response = await self._client.conversations_info(channel=channel_id)
        except SlackApiError as e:
            raise ChatPlatformError(f"conversations.info failed: {e.response.get('error')}") from e
        channel = response.get("channel") or {}
        return ChatChannel(
            id=channel_id,
            name=channel.get("name") or channel_id,
            purpose=(channel.get("purpose") or {}).get("value") or "No description",
            topic=(channel.get("topic") or {}).get("value") or "No topic",
        )

    async def get_thread_replies(self, channel_id: str, thread_ts: str) -> list[ChatMessage]:
        messages: list[ChatMessage] = []
        cursor: str | None = None
        try:
            while True:
                response = await self._client.conversations_replies(
                    channel=channel_id, ts=thread_ts, cursor=cursor
                )
                messages.extend(_message(m) for m in response.get("messages") or [])
                cursor = (response.get("response_metadata") or {}).get("next_cursor")
                if not cursor:
                    break
        except SlackApiError as e:
            raise ChatPlatformError(f"conversations.replies failed: {e.response.get('error')}") from e
        return messages

    async def get_channel_history(
        self, channel_id: str, cursor: str | None = None, limit: int = 100
    ) -> HistoryPage:
        try:
            response = await self._client.conversations_history(
                channel=channel_id, limit=limit, cursor=cursor
            )
        except SlackApiError as e:
            raise ChatPlatformError(f"conversations.history failed: {e.response.get('error')}") from e
        next_cursor = (response.get("response_metadata") or {}).get("next_cursor") or None
        return HistoryPage(
            messages=[_message(m) for m in response.get("messages") or []],
            next_cursor=next_cursor,
        )

    async def post_message(
        self,
        channel_id: str,
        text: str,
        thread_ts: str | None = None,
        blocks: list[dict[str, Any]] | None = None,
    ) -> None:
        """Post text, rendered from markdown into blocks unless blocks are given."""
        try:
            await self._client.chat_postMessage(
                channel=channel_id,
                text=text,
                thread_ts=thread_ts,
                blocks=blocks if blocks is not None else format_message_with_blocks(text),
            )
        except SlackApiError as e:
            raise ChatPlatformError(f"chat.postMessage failed: {e.response.get('error')}") from e

    async def add_reaction(self, channel_id: str, timestamp: str, name: str) -> None:
        try:
            await self._client.reactions_add(channel=channel_id, timestamp=timestamp, name=name)
        except SlackApiError as e:
            if e.response.get("error") == "already_reacted":
                return
            raise ChatPlatformError(f"reactions.add failed: {e.response.get('error')}") from e
