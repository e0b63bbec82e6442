"""Chat-platform value types consumed by the use cases."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ChatFile:
    """File attached to a message."""

    name: str
    mimetype: str
    url: str

    @property
    def is_image(self) -> bool:
        return self.mimetype.startswith("image/")

    @property
    def is_pdf(self) -> bool:
        return self.mimetype == "application/pdf"


@dataclass(frozen=True)
class ChatUser:
    """Workspace member with display name and job title."""

    id: str
    name: str
    title: str = "No title"


@dataclass(frozen=True)
class ChatChannel:
    id: str
    name: str
    purpose: str = "No description"
    topic: str = "No topic"


@dataclass
class ChatMessage:
    """Message as returned by history / thread reply listings."""

    ts: str
    text: str = ""
    user: str | None = None
    thread_ts: str | None = None
    is_bot: bool = False
    files: list[ChatFile] = field(default_factory=list)


@dataclass
class HistoryPage:
    """One page of channel history plus the opaque cursor for the next."""

    messages: list[ChatMessage]
    next_cursor: str | None = None
