"""Pytest fixtures for SlackRAG tests."""

from __future__ import annotations

import math
import re
import zlib
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

import pytest

from slackrag.application.dto.chunking_config import ChunkingConfig
from slackrag.application.ports import ExtractedContent
from slackrag.application.use_cases.knowledge.content_store import ContentStore
from slackrag.domain.entities import (
    ChatChannel,
    ChatMessage,
    ChatUser,
    Chunk,
    HistoryPage,
    SearchHit,
)
from slackrag.domain.exceptions import ChatPlatformError, GenerationError
from slackrag.domain.value_objects import SearchFilters
from slackrag.infrastructure.chunking.sentence_chunker import SentenceChunker


def cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


# --- Fake repositories ---


class FakeChunkRepository:
    """In-memory chunk repository with the same upsert key and per-thread collapse."""

    def __init__(self) -> None:
        self._rows: dict[tuple[str, str, int], Chunk] = {}
        self._next_id = 1

    @property
    def rows(self) -> list[Chunk]:
        return list(self._rows.values())

    async def upsert(self, chunk: Chunk, origin_ts: datetime | None = None) -> int:
        key = (chunk.channel_id, chunk.thread_ts, chunk.chunk_index)
        existing = self._rows.get(key)
        chunk_id = existing.id if existing else self._next_id
        if existing is None:
            self._next_id += 1
        self._rows[key] = replace(
            chunk, id=chunk_id, created_at=origin_ts or datetime.now(UTC)
        )
        return chunk_id

    async def delete_by_channel(self, channel_id: str) -> int:
        keys = [k for k in self._rows if k[0] == channel_id]
        for k in keys:
            del self._rows[k]
        return len(keys)

    def thread(self, channel_id: str, thread_ts: str) -> list[Chunk]:
        """Stored chunks of one thread in index order."""
        return sorted(
            (c for c in self._rows.values() if c.channel_id == channel_id and c.thread_ts == thread_ts),
            key=lambda c: c.chunk_index,
        )

    def _matches(self, chunk: Chunk, filters: SearchFilters | None) -> bool:
        if filters is None:
            return True
        if filters.channel and chunk.channel_id != filters.channel:
            return False
        if filters.user and chunk.sender_name != filters.user:
            return False
        if filters.min_date and chunk.created_at < filters.min_date:
            return False
        if filters.max_date and chunk.created_at > filters.max_date:
            return False
        return True

    async def search(
        self,
        query_embedding: list[float],
        limit: int = 15,
        min_similarity: float = 0.7,
        filters: SearchFilters | None = None,
    ) -> list[SearchHit]:
        best: dict[str, SearchHit] = {}
        for c in self._rows.values():
            if not self._matches(c, filters):
                continue
            similarity = cosine(query_embedding, c.embedding)
            if similarity <= min_similarity:
                continue
            current = best.get(c.thread_ts)
            if current is None or similarity > current.similarity:
                best[c.thread_ts] = SearchHit(
                    id=c.id,
                    channel_id=c.channel_id,
                    thread_ts=c.thread_ts,
                    chunk_index=c.chunk_index,
                    content=c.content,
                    sender_name=c.sender_name,
                    sender_title=c.sender_title,
                    similarity=similarity,
                    created_at=c.created_at,
                    metadata=dict(c.metadata),
                )
        hits = sorted(best.values(), key=lambda h: h.similarity, reverse=True)
        return hits[:limit]


class FakeUnitOfWork:
    """In-memory Unit of Work with a fake chunk repository."""

    def __init__(self, chunks: FakeChunkRepository | None = None) -> None:
        self.chunks = chunks or FakeChunkRepository()
        self.committed = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        pass


def make_uow_factory(uow: FakeUnitOfWork):
    """Factory yielding the same UnitOfWork so state survives across calls."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield uow
        await uow.commit()

    return _factory


# --- Fake collaborators ---


class FakeEmbeddingProvider:
    """Deterministic bag-of-words embedder: one hashed bucket per word."""

    def __init__(self, dimensions: int = 1024) -> None:
        self._dimensions = dimensions
        self.calls: list[list[str]] = []

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def vector(self, text: str) -> list[float]:
        vec = [0.0] * self._dimensions
        for word in re.findall(r"\w+", text.lower()):
            vec[zlib.crc32(word.encode()) % self._dimensions] += 1.0
        return vec

    async def embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self.vector(t) for t in texts]


class FakeChatPlatform:
    """Records posts and reactions; serves canned users, threads and history."""

    def __init__(self) -> None:
        self.users: dict[str, ChatUser] = {}
        self.threads: dict[str, list[ChatMessage]] = {}
        self.history: list[HistoryPage] = []
        self.history_cursors: list[str | None] = []
        self.posted: list[dict[str, Any]] = []
        self.reactions: list[tuple[str, str, str]] = []
        self.fail_reactions = False
        self.fail_threads = False

    async def get_user(self, user_id: str) -> ChatUser:
        if user_id not in self.users:
            raise ChatPlatformError(f"user_not_found: {user_id}")
        return self.users[user_id]

    async def get_channel(self, channel_id: str) -> ChatChannel:
        return ChatChannel(id=channel_id, name=channel_id)

    async def get_thread_replies(self, channel_id: str, thread_ts: str) -> list[ChatMessage]:
        if self.fail_threads:
            raise ChatPlatformError("thread_not_found")
        return list(self.threads.get(thread_ts, []))

    async def get_channel_history(
        self, channel_id: str, cursor: str | None = None, limit: int = 100
    ) -> HistoryPage:
        self.history_cursors.append(cursor)
        index = len(self.history_cursors) - 1
        return self.history[index] if index < len(self.history) else HistoryPage(messages=[])

    async def post_message(
        self,
        channel_id: str,
        text: str,
        thread_ts: str | None = None,
        blocks: list[dict[str, Any]] | None = None,
    ) -> None:
        self.posted.append({"channel": channel_id, "text": text, "thread_ts": thread_ts})

    async def add_reaction(self, channel_id: str, timestamp: str, name: str) -> None:
        if self.fail_reactions:
            raise ChatPlatformError("missing_scope")
        self.reactions.append((channel_id, timestamp, name))


class FakeGenerator:
    """Summaries echo their input; answers return a canned reply."""

    def __init__(self, reply: str = "Here is what I found.", fail: bool = False) -> None:
        self.reply = reply
        self.fail = fail
        self.answers: list[tuple[str, str]] = []

    async def summarize(self, text: str) -> str:
        if self.fail:
            raise GenerationError("model unavailable")
        return f"summary: {text[:40]}"

    async def answer(self, system_context: str, user_message: str) -> str:
        self.answers.append((system_context, user_message))
        if self.fail:
            raise GenerationError("model unavailable")
        return self.reply


class FakeExtractor:
    """Serves canned content per URL; exceptions in the table are raised."""

    def __init__(self, table: dict[str, ExtractedContent | Exception] | None = None) -> None:
        self.table = table or {}
        self.requested: list[str] = []

    async def extract(self, url: str) -> ExtractedContent:
        self.requested.append(url)
        value = self.table.get(url)
        if value is None:
            return ExtractedContent(content=f"content of {url}", summary=f"summary of {url}")
        if isinstance(value, Exception):
            raise value
        return value


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager over the test's FakeUnitOfWork."""
    return make_uow_factory(fake_uow)


@pytest.fixture
def embedding_provider() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def chunking_config() -> ChunkingConfig:
    """Default chunking config used by the content store."""
    return ChunkingConfig(max_tokens_per_chunk=1000)


@pytest.fixture
def content_store(uow_factory, embedding_provider, chunking_config) -> ContentStore:
    return ContentStore(
        unit_of_work_factory=uow_factory,
        chunker=SentenceChunker(),
        embedding_provider=embedding_provider,
        chunking_config=chunking_config,
    )


@pytest.fixture
def chat() -> FakeChatPlatform:
    platform = FakeChatPlatform()
    platform.users["U1"] = ChatUser(id="U1", name="Ada Lovelace", title="Engineer")
    platform.users["U2"] = ChatUser(id="U2", name="Grace Hopper", title="Admiral")
    return platform


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()
