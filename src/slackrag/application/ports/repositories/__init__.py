"""Repository ports."""

from slackrag.application.ports.repositories.chunk_repository import ChunkRepository

__all__ = ["ChunkRepository"]
