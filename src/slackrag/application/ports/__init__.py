"""Application ports - interfaces for external adapters."""

from slackrag.application.ports.chat_platform import ChatPlatform
from slackrag.application.ports.chunker import Chunker
from slackrag.application.ports.content_extractor import (
    ExtractedContent,
    FileExtractor,
    LinkExtractor,
)
from slackrag.application.ports.embedding_provider import EmbeddingProvider
from slackrag.application.ports.generator import Generator
from slackrag.application.ports.token_estimator import TokenEstimator
from slackrag.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "ChatPlatform",
    "Chunker",
    "EmbeddingProvider",
    "ExtractedContent",
    "FileExtractor",
    "Generator",
    "LinkExtractor",
    "TokenEstimator",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
