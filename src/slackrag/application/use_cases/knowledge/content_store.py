"""Content store - chunk, embed, upsert, search and delete stored knowledge."""

import logging
from datetime import datetime
from typing import Any

from slackrag.application.dto.chunking_config import ChunkingConfig
from slackrag.application.ports import Chunker, EmbeddingProvider, UnitOfWorkFactory
from slackrag.domain.entities import Chunk, SearchHit
from slackrag.domain.value_objects import SearchFilters

logger = logging.getLogger(__name__)


class ContentStore:
    """Write and read path over the chunk table.

    Every upsert runs in its own unit of work: a document's chunks are
    written one row at a time, in index order, with no transaction spanning
    the whole set.
    """

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        chunker: Chunker,
        embedding_provider: EmbeddingProvider,
        chunking_config: ChunkingConfig | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._chunker = chunker
        self._embedding_provider = embedding_provider
        self._chunking_config = chunking_config or ChunkingConfig()

    async def _embed_one(self, text: str) -> list[float]:
        vectors = await self._embedding_provider.embed([text])
        return vectors[0]

    async def upsert_chunk(
        self,
        channel_id: str,
        thread_ts: str,
        chunk_index: int,
        content: str,
        sender_name: str | None = None,
        sender_title: str | None = None,
        metadata: dict[str, Any] | None = None,
        origin_ts: datetime | None = None,
    ) -> int:
        """Embed content and insert or overwrite the (channel, thread, index) row."""
        embedding = await self._embed_one(content)
        chunk = Chunk(
            channel_id=channel_id,
            thread_ts=thread_ts,
            chunk_index=chunk_index,
            content=content,
            embedding=embedding,
            sender_name=sender_name,
            sender_title=sender_title,
            metadata=dict(metadata or {}),
        )
        async with self._uow_factory() as uow:
            chunk_id = await uow.chunks.upsert(chunk, origin_ts=origin_ts)
        logger.debug(
            "Stored chunk %s of %s/%s as id %s", chunk_index, channel_id, thread_ts, chunk_id
        )
        return chunk_id

    async def store_document(
        self,
        channel_id: str,
        thread_ts: str,
        full_text: str | None,
        sender_name: str | None = None,
        sender_title: str | None = None,
        origin_ts: datetime | None = None,
    ) -> list[int]:
        """Chunk full_text and upsert each chunk in order. Empty text writes nothing."""
        chunks = self._chunker.chunk(full_text, self._chunking_config)
        if not chunks:
            return []
        total = len(chunks)
        ids: list[int] = []
        for index, content in enumerate(chunks):
            ids.append(
                await self.upsert_chunk(
                    channel_id,
                    thread_ts,
                    index,
                    content,
                    sender_name=sender_name,
                    sender_title=sender_title,
                    metadata={"total_chunks": total},
                    origin_ts=origin_ts,
                )
            )
        logger.info("Stored %d chunks for %s/%s", total, channel_id, thread_ts)
        return ids

    async def search(
        self,
        query_text: str,
        limit: int = 15,
        min_similarity: float = 0.7,
        filters: SearchFilters | None = None,
    ) -> list[SearchHit]:
        """Top chunks by cosine similarity, at most one per thread."""
        query_embedding = await self._embed_one(query_text)
        async with self._uow_factory() as uow:
            return await uow.chunks.search(
                query_embedding=query_embedding,
                limit=limit,
                min_similarity=min_similarity,
                filters=filters,
            )

    async def delete_channel(self, channel_id: str) -> int:
        """Irreversibly delete every chunk of a channel."""
        async with self._uow_factory() as uow:
            deleted = await uow.chunks.delete_by_channel(channel_id)
        logger.info("Deleted %d chunks from channel %s", deleted, channel_id)
        return deleted
