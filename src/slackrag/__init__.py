"""SlackRAG - Slack knowledge-capture bot with pgvector retrieval."""

__version__ = "0.1.0"
