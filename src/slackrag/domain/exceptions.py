"""Domain exceptions."""


class SlackRAGError(Exception):
    """Base exception for SlackRAG."""

    pass


class ExtractionError(SlackRAGError):
    """Link, file or document content could not be extracted."""

    pass


class SourcePermissionError(ExtractionError):
    """Access-gated source (Drive file, Notion page) is not shared with the bot."""

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class EmbeddingServiceError(SlackRAGError):
    """Embedding API failed or timed out."""

    pass


class StoreUnavailableError(SlackRAGError):
    """Persistence engine could not be reached."""

    pass


class GenerationError(SlackRAGError):
    """Summarization or answer generation failed."""

    pass


class ConfigurationError(SlackRAGError):
    """Deployment is misconfigured (e.g. embedding dimension mismatch)."""

    pass


class ChatPlatformError(SlackRAGError):
    """Chat platform API call failed."""

    pass
