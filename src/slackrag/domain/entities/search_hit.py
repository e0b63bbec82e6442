"""Search hit - one row returned by similarity search."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class SearchHit:
    """Best-matching chunk of one thread with its cosine similarity."""

    id: int
    channel_id: str
    thread_ts: str
    chunk_index: int
    content: str
    sender_name: str | None
    sender_title: str | None
    similarity: float
    created_at: datetime
    metadata: dict[str, Any] = field(default_factory=dict)
