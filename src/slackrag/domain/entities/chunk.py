"""Chunk entity - stored text segment with embedding and provenance."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Chunk:
    """Chunk - bounded segment of a channel/thread document.

    (channel_id, thread_ts, chunk_index) identifies at most one stored row.
    """

    channel_id: str
    thread_ts: str
    chunk_index: int
    content: str
    embedding: list[float]
    sender_name: str | None = None
    sender_title: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    id: int | None = None
