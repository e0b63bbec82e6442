"""Chunking configuration DTO."""

from dataclasses import dataclass


@dataclass
class ChunkingConfig:
    """Configuration for sentence-aligned chunking."""

    max_tokens_per_chunk: int = 1000
