"""Relevant context use case - bounded, recency-ordered knowledge for a prompt."""

import logging
from datetime import UTC, datetime

from slackrag.application.ports import TokenEstimator
from slackrag.application.use_cases.knowledge.content_store import ContentStore
from slackrag.domain.entities import SearchHit
from slackrag.domain.exceptions import EmbeddingServiceError, StoreUnavailableError
from slackrag.domain.value_objects import days_since, permalink

logger = logging.getLogger(__name__)


class GetRelevantContextUseCase:
    """Retrieve similar chunks, newest first, greedily packed into a token budget."""

    def __init__(
        self,
        content_store: ContentStore,
        estimator: TokenEstimator,
        candidate_pool: int = 10,
        min_similarity: float = 0.7,
        base_uri: str | None = None,
    ) -> None:
        self._content_store = content_store
        self._estimator = estimator
        self._candidate_pool = candidate_pool
        self._min_similarity = min_similarity
        self._base_uri = base_uri

    def format_hit(self, hit: SearchHit, now: datetime | None = None) -> str:
        """Provenance-annotated line for one retrieved chunk."""
        days = days_since(hit.created_at, now)
        line = (
            f"Message from {hit.sender_name or 'Unknown'} "
            f"({hit.sender_title or 'No title'}) {days} days ago: {hit.content}"
        )
        if self._base_uri:
            line += f"\nLink: {permalink(self._base_uri, hit.channel_id, hit.thread_ts)}"
        return line + "\n\n"

    async def execute(self, query_text: str, max_tokens: int = 4000) -> str:
        """Return concatenated context lines, or "" when nothing matched or fit."""
        try:
            hits = await self._content_store.search(
                query_text,
                limit=self._candidate_pool,
                min_similarity=self._min_similarity,
            )
        except (StoreUnavailableError, EmbeddingServiceError) as e:
            logger.warning("Context retrieval failed, continuing without context: %s", e)
            return ""

        hits.sort(key=lambda h: h.created_at, reverse=True)
        now = datetime.now(UTC)
        lines: list[str] = []
        used = 0
        for hit in hits:
            line = self.format_hit(hit, now)
            cost = self._estimator.estimate(line)
            if used + cost > max_tokens:
                break
            lines.append(line)
            used += cost
        return "".join(lines)
