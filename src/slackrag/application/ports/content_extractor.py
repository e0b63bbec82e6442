"""Content extractor ports - links, images, PDFs."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ExtractedContent:
    """Raw text pulled from a source plus its short summary."""

    content: str
    summary: str


class LinkExtractor(Protocol):
    """Fetch and summarize the content behind a URL. Raises ExtractionError."""

    async def extract(self, url: str) -> ExtractedContent: ...


class FileExtractor(Protocol):
    """Extract content from a downloadable file. Raises ExtractionError."""

    async def extract(self, url: str) -> ExtractedContent: ...
