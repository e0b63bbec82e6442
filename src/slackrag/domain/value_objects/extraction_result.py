"""Outcome of extracting one link or file."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractionResult:
    """Either extracted content + summary, or the reason extraction failed."""

    source: str
    content: str | None = None
    summary: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, source: str, content: str, summary: str) -> "ExtractionResult":
        return cls(source=source, content=content, summary=summary)

    @classmethod
    def failure(cls, source: str, reason: str) -> "ExtractionResult":
        return cls(source=source, error=reason)
