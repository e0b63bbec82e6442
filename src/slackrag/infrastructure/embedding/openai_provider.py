"""OpenAI-compatible embedding provider."""

import logging

import openai
from openai import AsyncOpenAI

from slackrag.application.ports.token_estimator import TokenEstimator
from slackrag.domain.exceptions import ConfigurationError, EmbeddingServiceError
from slackrag.infrastructure.chunking.token_estimators import CharacterTokenEstimator

logger = logging.getLogger(__name__)


def truncate_to_token_budget(
    text: str, max_tokens: int, estimator: TokenEstimator
) -> str:
    """Drop trailing words so the estimated size fits max_tokens.

    Text already within budget is returned unchanged. Otherwise words are
    kept in order until the next word would cross the budget.
    """
    if estimator.estimate(text) <= max_tokens:
        return text
    kept: list[str] = []
    used = 0
    for word in text.split():
        cost = estimator.estimate(word)
        if used + cost > max_tokens:
            break
        kept.append(word)
        used += cost
    return " ".join(kept)


class OpenAIEmbeddingProvider:
    """Embedding provider using OpenAI-compatible API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        dimensions: int = 1536,
        max_input_tokens: int = 8000,
        timeout: float = 30.0,
        estimator: TokenEstimator | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._client = client or AsyncOpenAI(base_url=base_url, api_key=api_key, timeout=timeout)
        self._model = model
        self._timeout = timeout
        self._dimensions = dimensions
        self._max_input_tokens = max_input_tokens
        self._estimator = estimator or CharacterTokenEstimator()

    @property
    def dimensions(self) -> int:
        return self._dimensions

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for texts, truncating oversize inputs."""
        if not texts:
            return []
        inputs = [
            truncate_to_token_budget(t, self._max_input_tokens, self._estimator)
            for t in texts
        ]
        try:
            response = await self._client.embeddings.create(
                model=self._model,
                input=inputs,
                dimensions=self._dimensions,
                encoding_format="float",
                timeout=self._timeout,
            )
        except openai.APIError as e:
            logger.error("Embedding request failed: %s", e)
            raise EmbeddingServiceError(f"Embedding request failed: {e}") from e

        vectors = [d.embedding for d in response.data]
        for v in vectors:
            if len(v) != self._dimensions:
                raise ConfigurationError(
                    f"Embedding model {self._model} returned {len(v)} dimensions, "
                    f"store expects {self._dimensions}"
                )
        return vectors
