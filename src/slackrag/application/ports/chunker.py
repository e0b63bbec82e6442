"""Chunker port - text splitting strategies."""

from typing import Protocol

from slackrag.application.dto.chunking_config import ChunkingConfig


class Chunker(Protocol):
    """Port for splitting text into chunks."""

    def chunk(self, text: str | None, config: ChunkingConfig) -> list[str]: ...
