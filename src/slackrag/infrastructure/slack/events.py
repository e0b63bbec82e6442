"""Slack Events API payload -> InboundEvent."""

import logging
from typing import Any

from slackrag.domain.entities import ChatFile, InboundEvent
from slackrag.domain.value_objects import SLACK_EVENT_TYPES

logger = logging.getLogger(__name__)

# Message subtypes that carry no knowledge.
IGNORED_SUBTYPES = frozenset(
    {
        "bot_message",
        "message_changed",
        "message_deleted",
        "channel_join",
        "channel_leave",
        "channel_topic",
        "channel_purpose",
        "channel_name",
    }
)


def parse_files(raw_files: list[dict[str, Any]] | None) -> list[ChatFile]:
    files = []
    for f in raw_files or []:
        url = f.get("url_private_download") or f.get("url_private")
        if not url:
            continue
        files.append(
            ChatFile(name=f.get("name") or f.get("id", "file"), mimetype=f.get("mimetype", ""), url=url)
        )
    return files


def parse_slack_event(payload: dict[str, Any]) -> InboundEvent | None:
    """Normalize an event_callback payload; None for events the bot ignores."""
    if payload.get("type") != "event_callback":
        return None
    event = payload.get("event") or {}
    raw_type = event.get("type", "")
    event_type = SLACK_EVENT_TYPES.get(raw_type)
    if event_type is None:
        logger.debug("Ignoring Slack event type %s", raw_type)
        return None
    if raw_type == "message" and (event.get("bot_id") or event.get("subtype") in IGNORED_SUBTYPES):
        return None

    channel = event.get("channel")
    if isinstance(channel, dict):
        channel = channel.get("id")
    if not channel:
        return None

    authorizations = payload.get("authorizations") or []
    bot_user_id = authorizations[0].get("user_id") if authorizations else None
    links = [link["url"] for link in event.get("links") or [] if link.get("url")]
    return InboundEvent(
        type=event_type,
        channel_id=channel,
        user_id=event.get("user"),
        ts=event.get("ts") or event.get("event_ts"),
        text=event.get("text") or "",
        thread_ts=event.get("thread_ts"),
        files=parse_files(event.get("files")),
        links=links,
        bot_user_id=bot_user_id,
        raw_type=raw_type,
    )
