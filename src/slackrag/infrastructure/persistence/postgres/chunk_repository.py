"""PostgreSQL chunk repository implementation."""

from datetime import datetime
from typing import Any

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from slackrag.domain.entities import Chunk, SearchHit
from slackrag.domain.value_objects import SearchFilters

_COLUMNS = (
    "id, channel_name, thread_ts, content, user_name, user_title, "
    "chunk_index, metadata, created_at"
)


def _build_filter_conditions(
    filters: SearchFilters | None,
) -> tuple[list[str], dict[str, Any]]:
    """Build SQL AND conditions and named params for search filters."""
    conditions: list[str] = []
    params: dict[str, Any] = {}
    if filters is None:
        return conditions, params
    if filters.channel:
        conditions.append("channel_name = %(channel)s")
        params["channel"] = filters.channel
    if filters.user:
        conditions.append("user_name = %(user)s")
        params["user"] = filters.user
    if filters.min_date is not None:
        conditions.append("created_at >= %(min_date)s")
        params["min_date"] = filters.min_date
    if filters.max_date is not None:
        conditions.append("created_at <= %(max_date)s")
        params["max_date"] = filters.max_date
    return conditions, params


class PostgresChunkRepository:
    """Chunk repository backed by the pgvector `messages` table."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def upsert(self, chunk: Chunk, origin_ts: datetime | None = None) -> int:
        """Insert chunk or overwrite the row with the same (channel, thread, index)."""
        cur = await self._conn.execute(
            """
            INSERT INTO messages (channel_name, thread_ts, content, user_name, user_title,
                                  chunk_index, metadata, embedding, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s::vector, COALESCE(%s::timestamptz, now()))
            ON CONFLICT (channel_name, thread_ts, chunk_index) DO UPDATE
            SET content = EXCLUDED.content,
                user_name = EXCLUDED.user_name,
                user_title = EXCLUDED.user_title,
                metadata = EXCLUDED.metadata,
                embedding = EXCLUDED.embedding,
                created_at = EXCLUDED.created_at
            RETURNING id
            """,
            (
                chunk.channel_id,
                chunk.thread_ts,
                chunk.content,
                chunk.sender_name,
                chunk.sender_title,
                chunk.chunk_index,
                Jsonb(chunk.metadata),
                chunk.embedding,
                origin_ts,
            ),
        )
        row = await cur.fetchone()
        return row[0]

    async def delete_by_channel(self, channel_id: str) -> int:
        """Delete every chunk of a channel. Returns deleted row count."""
        cur = await self._conn.execute(
            "DELETE FROM messages WHERE channel_name = %s", (channel_id,)
        )
        return cur.rowcount

    async def search(
        self,
        query_embedding: list[float],
        limit: int = 15,
        min_similarity: float = 0.7,
        filters: SearchFilters | None = None,
    ) -> list[SearchHit]:
        """Cosine similarity search, best chunk per thread, similarity descending."""
        conds, params = _build_filter_conditions(filters)
        where_extra = "".join(f" AND {c}" for c in conds)
        params.update(
            {"query": query_embedding, "min_similarity": min_similarity, "limit": limit}
        )
        cur = await self._conn.execute(
            f"""
            WITH ranked AS (
                SELECT {_COLUMNS},
                       1 - (embedding <=> %(query)s::vector) AS similarity,
                       ROW_NUMBER() OVER (
                           PARTITION BY thread_ts
                           ORDER BY embedding <=> %(query)s::vector
                       ) AS rank
                FROM messages
                WHERE 1 - (embedding <=> %(query)s::vector) > %(min_similarity)s{where_extra}
            )
            SELECT {_COLUMNS}, similarity
            FROM ranked
            WHERE rank = 1
            ORDER BY similarity DESC
            LIMIT %(limit)s
            """,
            params,
        )
        rows = await cur.fetchall()
        return [
            SearchHit(
                id=r[0],
                channel_id=r[1],
                thread_ts=r[2],
                content=r[3],
                sender_name=r[4],
                sender_title=r[5],
                chunk_index=r[6],
                metadata=r[7] or {},
                created_at=r[8],
                similarity=float(r[9]),
            )
            for r in rows
        ]
