"""Domain entities."""

from slackrag.domain.entities.chat import (
    ChatChannel,
    ChatFile,
    ChatMessage,
    ChatUser,
    HistoryPage,
)
from slackrag.domain.entities.chunk import Chunk
from slackrag.domain.entities.document import IngestDocument, Segment
from slackrag.domain.entities.event import InboundEvent
from slackrag.domain.entities.search_hit import SearchHit

__all__ = [
    "ChatChannel",
    "ChatFile",
    "ChatMessage",
    "ChatUser",
    "Chunk",
    "HistoryPage",
    "InboundEvent",
    "IngestDocument",
    "SearchHit",
    "Segment",
]
