"""Chunk repository port."""

from typing import Any, Protocol

from slackrag.domain.entities import Chunk, SearchHit
from slackrag.domain.value_objects import SearchFilters


class ChunkRepository(Protocol):
    """Port for chunk persistence."""

    async def upsert(self, chunk: Chunk, origin_ts: Any = None) -> int: ...

    async def delete_by_channel(self, channel_id: str) -> int: ...

    async def search(
        self,
        query_embedding: list[float],
        limit: int = 15,
        min_similarity: float = 0.7,
        filters: SearchFilters | None = None,
    ) -> list[SearchHit]: ...
