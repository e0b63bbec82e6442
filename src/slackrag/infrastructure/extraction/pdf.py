"""PDF text extraction."""

import asyncio
import io

import httpx
from pypdf import PdfReader

from slackrag.application.ports import ExtractedContent, Generator
from slackrag.domain.exceptions import ExtractionError
from slackrag.infrastructure.extraction.base import download, summarized


def pdf_text(data: bytes) -> str:
    """Extract text from PDF bytes, pages separated by blank lines."""
    try:
        reader = PdfReader(io.BytesIO(data))
        parts = [t for t in (page.extract_text() for page in reader.pages) if t]
    except Exception as e:
        raise ExtractionError(f"Invalid or corrupted PDF: {e}") from e
    return "\n\n".join(parts)


class PdfExtractor:
    """Download a (Slack-hosted) PDF with the bot token and extract its text."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        summarizer: Generator,
        bot_token: str = "",
        timeout: float = 30.0,
    ) -> None:
        self._http = http
        self._summarizer = summarizer
        self._bot_token = bot_token
        self._timeout = timeout

    async def extract(self, url: str) -> ExtractedContent:
        headers = {"Authorization": f"Bearer {self._bot_token}"} if self._bot_token else None
        response = await download(self._http, url, headers=headers, timeout=self._timeout)
        text = await asyncio.to_thread(pdf_text, response.content)
        return await summarized(self._summarizer, text, url)
