"""Unit tests for GetRelevantContextUseCase."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from slackrag.application.use_cases.knowledge.content_store import ContentStore
from slackrag.application.use_cases.search.relevant_context import GetRelevantContextUseCase
from slackrag.domain.entities import SearchHit
from slackrag.domain.exceptions import EmbeddingServiceError, StoreUnavailableError
from slackrag.infrastructure.chunking.token_estimators import CharacterTokenEstimator

NOW = datetime.now(UTC)


async def _seed(store: ContentStore) -> None:
    await store.upsert_chunk(
        "eng", "100.1", 0, "deploy status broken", sender_name="Ada", sender_title="Engineer",
        origin_ts=NOW - timedelta(days=10),
    )
    await store.upsert_chunk(
        "eng", "200.1", 0, "deploy status fixed", sender_name="Grace", sender_title="Admiral",
        origin_ts=NOW - timedelta(days=1),
    )
    await store.upsert_chunk(
        "eng", "300.1", 0, "deploy status unknown", origin_ts=NOW - timedelta(days=5),
    )


def _use_case(store: ContentStore, **kwargs) -> GetRelevantContextUseCase:
    return GetRelevantContextUseCase(
        content_store=store,
        estimator=CharacterTokenEstimator(),
        min_similarity=0.0,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_context_is_ordered_newest_first(content_store: ContentStore) -> None:
    await _seed(content_store)

    context = await _use_case(content_store).execute("deploy status", max_tokens=4000)

    fixed = context.index("deploy status fixed")
    unknown = context.index("deploy status unknown")
    broken = context.index("deploy status broken")
    assert fixed < unknown < broken


@pytest.mark.asyncio
async def test_context_lines_carry_provenance(content_store: ContentStore) -> None:
    await _seed(content_store)

    context = await _use_case(content_store).execute("deploy status")

    assert "Message from Grace (Admiral) 1 days ago: deploy status fixed\n\n" in context
    assert "Message from Unknown (No title) 5 days ago: deploy status unknown" in context


@pytest.mark.asyncio
async def test_context_respects_token_budget(content_store: ContentStore) -> None:
    await _seed(content_store)
    estimator = CharacterTokenEstimator()

    for budget in (0, 10, 20, 40, 60):
        context = await _use_case(content_store).execute("deploy status", max_tokens=budget)
        assert estimator.estimate(context) <= budget

    one = await _use_case(content_store).execute("deploy status", max_tokens=20)
    assert one.count("Message from") == 1
    assert "deploy status fixed" in one


@pytest.mark.asyncio
async def test_context_empty_when_nothing_matches(content_store: ContentStore) -> None:
    assert await _use_case(content_store).execute("anything") == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [StoreUnavailableError("down"), EmbeddingServiceError("timeout")])
async def test_context_empty_on_infrastructure_failure(error: Exception) -> None:
    store = AsyncMock()
    store.search.side_effect = error
    use_case = GetRelevantContextUseCase(store, CharacterTokenEstimator())
    assert await use_case.execute("deploy status") == ""


def test_format_hit_appends_permalink() -> None:
    hit = SearchHit(
        id=1,
        channel_id="C1",
        thread_ts="100.1",
        chunk_index=0,
        content="hello",
        sender_name=None,
        sender_title=None,
        similarity=0.9,
        created_at=NOW,
    )
    use_case = GetRelevantContextUseCase(
        AsyncMock(), CharacterTokenEstimator(), base_uri="https://acme.slack.com/archives/"
    )
    assert use_case.format_hit(hit, NOW) == (
        "Message from Unknown (No title) 0 days ago: hello\n"
        "Link: https://acme.slack.com/archives/C1/p1001\n\n"
    )
