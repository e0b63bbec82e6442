"""Generic web page extraction."""

import asyncio
import re
from html import unescape

import httpx

from slackrag.application.ports import ExtractedContent, Generator
from slackrag.infrastructure.extraction.base import download, summarized
from slackrag.infrastructure.extraction.pdf import pdf_text

_DROP_BLOCKS_RE = re.compile(
    r"<(script|style|noscript|svg|nav|header|footer|aside)\b[^>]*>.*?</\1\s*>",
    re.IGNORECASE | re.DOTALL,
)
_BLOCK_TAG_RE = re.compile(r"</?(p|div|br|li|h[1-6]|tr|section|article)\b[^>]*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)

USER_AGENT = "Mozilla/5.0 (compatible; SlackRAG/0.1; +https://api.slack.com/bot-users)"


def html_to_text(html: str) -> str:
    """Visible text of an HTML page, one block element per line."""
    text = _DROP_BLOCKS_RE.sub(" ", html)
    text = _BLOCK_TAG_RE.sub("\n", text)
    text = unescape(_TAG_RE.sub(" ", text))
    lines = (" ".join(line.split()) for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def html_title(html: str) -> str | None:
    match = _TITLE_RE.search(html)
    if not match:
        return None
    return " ".join(unescape(match.group(1)).split()) or None


class WebPageExtractor:
    """Fetch a public page and keep its readable text."""

    def __init__(self, http: httpx.AsyncClient, summarizer: Generator, timeout: float = 30.0) -> None:
        self._http = http
        self._summarizer = summarizer
        self._timeout = timeout

    async def extract(self, url: str) -> ExtractedContent:
        response = await download(
            self._http, url, headers={"User-Agent": USER_AGENT}, timeout=self._timeout
        )
        content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
        if content_type == "application/pdf":
            text = await asyncio.to_thread(pdf_text, response.content)
            return await summarized(self._summarizer, text, url)

        body = response.text
        if content_type in ("text/html", "application/xhtml+xml", ""):
            text = html_to_text(body)
            title = html_title(body)
            if title and text:
                text = f"{title}\n{text}"
        else:
            text = body
        return await summarized(self._summarizer, text, url)
