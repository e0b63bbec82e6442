"""Inbound workspace event types."""

from enum import StrEnum


class EventType(StrEnum):
    """Event kinds the bot reacts to."""

    MEMBER_JOINED = "member_joined"
    MEMBER_LEFT = "member_left"
    MENTION = "mention"
    MESSAGE = "message"


# Slack Events API type -> EventType
SLACK_EVENT_TYPES: dict[str, EventType] = {
    "member_joined_channel": EventType.MEMBER_JOINED,
    "group_joined": EventType.MEMBER_JOINED,
    "member_left_channel": EventType.MEMBER_LEFT,
    "channel_left": EventType.MEMBER_LEFT,
    "group_left": EventType.MEMBER_LEFT,
    "app_mention": EventType.MENTION,
    "message": EventType.MESSAGE,
}
