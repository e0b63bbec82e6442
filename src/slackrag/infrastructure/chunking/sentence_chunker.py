"""Sentence-aligned text chunker implementation."""

import re

from slackrag.application.dto.chunking_config import ChunkingConfig
from slackrag.application.ports.token_estimator import TokenEstimator
from slackrag.infrastructure.chunking.token_estimators import CharacterTokenEstimator

# Boundary: terminator run followed by whitespace, so URLs and decimals stay whole.
_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> list[str]:
    """Split on '.', '!' and '?' keeping the punctuation with its sentence."""
    return [s.strip() for s in _BOUNDARY_RE.split(text) if s.strip()]


class SentenceChunker:
    """Chunker that packs whole sentences into token-bounded chunks.

    A chunk may overrun the budget by at most one sentence: a sentence that
    alone exceeds the budget is emitted as its own chunk rather than split.
    """

    def __init__(self, estimator: TokenEstimator | None = None) -> None:
        self._estimator = estimator or CharacterTokenEstimator()

    def chunk(self, text: str | None, config: ChunkingConfig) -> list[str]:
        """Split text into ordered, sentence-aligned chunks."""
        if not text:
            return []

        max_tokens = config.max_tokens_per_chunk
        chunks: list[str] = []
        buffer = ""
        for sentence in split_sentences(text):
            candidate = f"{buffer} {sentence}" if buffer else sentence
            if buffer and self._estimator.estimate(candidate) > max_tokens:
                chunks.append(buffer)
                buffer = sentence
            else:
                buffer = candidate
        if buffer:
            chunks.append(buffer)
        return chunks
