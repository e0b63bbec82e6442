"""Inbound event entity."""

from dataclasses import dataclass, field

from slackrag.domain.entities.chat import ChatFile, ChatMessage
from slackrag.domain.value_objects import EventType


@dataclass
class InboundEvent:
    """Workspace event normalized from the chat platform payload."""

    type: EventType
    channel_id: str
    user_id: str | None = None
    ts: str | None = None
    text: str = ""
    thread_ts: str | None = None
    files: list[ChatFile] = field(default_factory=list)
    links: list[str] = field(default_factory=list)
    bot_user_id: str | None = None
    raw_type: str | None = None

    @property
    def document_ts(self) -> str | None:
        """Thread root when threaded, else the message's own timestamp."""
        return self.thread_ts or self.ts

    def as_message(self) -> ChatMessage:
        return ChatMessage(
            ts=self.ts or "",
            text=self.text,
            user=self.user_id,
            thread_ts=self.thread_ts,
            files=list(self.files),
        )

    @classmethod
    def from_message(cls, message: ChatMessage, channel_id: str) -> "InboundEvent":
        """Build a plain-message event from a history entry (backfill)."""
        return cls(
            type=EventType.MESSAGE,
            channel_id=channel_id,
            user_id=message.user,
            ts=message.ts,
            text=message.text,
            thread_ts=message.thread_ts,
            files=list(message.files),
        )
