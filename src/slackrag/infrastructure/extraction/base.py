"""Shared helpers for content extractors."""

import logging

import httpx

from slackrag.application.ports import ExtractedContent, Generator
from slackrag.domain.exceptions import ExtractionError, GenerationError

logger = logging.getLogger(__name__)


async def download(
    http: httpx.AsyncClient,
    url: str,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
) -> httpx.Response:
    """GET url, raising ExtractionError on network failure or non-2xx status."""
    try:
        response = await http.get(url, headers=headers, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ExtractionError(
            f"Failed to download {url}: HTTP {e.response.status_code}"
        ) from e
    except httpx.HTTPError as e:
        raise ExtractionError(f"Failed to download {url}: {e}") from e
    return response


async def summarized(summarizer: Generator, content: str, source: str) -> ExtractedContent:
    """Pair content with its summary; summary failure fails the extraction."""
    if not content or not content.strip():
        raise ExtractionError(f"No meaningful content found in {source}")
    try:
        summary = await summarizer.summarize(content)
    except GenerationError as e:
        raise ExtractionError(f"Could not summarize {source}: {e}") from e
    return ExtractedContent(content=content, summary=summary)
