"""Notion page extraction through the Notion REST API."""

import re
from typing import Any

import httpx

from slackrag.application.ports import ExtractedContent, Generator
from slackrag.domain.exceptions import ExtractionError, SourcePermissionError
from slackrag.infrastructure.extraction.base import summarized

NOTION_API_URL = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"

_PAGE_ID_RE = re.compile(r"([0-9a-f]{32}|[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})", re.I)

_PREFIXES = {
    "heading_1": "# ",
    "heading_2": "## ",
    "heading_3": "### ",
    "bulleted_list_item": "- ",
    "numbered_list_item": "1. ",
    "to_do": "[ ] ",
    "quote": "> ",
}


def page_id_from_url(url: str) -> str | None:
    """Notion page id (32 hex chars, dashes removed) from a page URL."""
    path = url.split("?")[0].split("#")[0]
    matches = _PAGE_ID_RE.findall(path)
    if not matches:
        return None
    return matches[-1].replace("-", "").lower()


def block_text(block: dict[str, Any]) -> str:
    """Plain text of one block, with a markdown-ish prefix for its type."""
    block_type = block.get("type", "")
    body = block.get(block_type) or {}
    rich = body.get("rich_text") or []
    text = "".join(part.get("plain_text", "") for part in rich)
    if block_type == "child_page":
        text = body.get("title", "")
    if not text:
        return ""
    return _PREFIXES.get(block_type, "") + text


class NotionPageExtractor:
    """Read a page's blocks via the Notion API and summarize them."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        summarizer: Generator,
        token: str = "",
        timeout: float = 30.0,
    ) -> None:
        self._http = http
        self._summarizer = summarizer
        self._token = token
        self._timeout = timeout

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = await self._http.get(
                f"{NOTION_API_URL}{path}",
                params=params,
                headers={
                    "Authorization": f"Bearer {self._token}",
                    "Notion-Version": NOTION_VERSION,
                },
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            raise ExtractionError(f"Notion API error: {e}") from e
        if response.status_code == 401:
            raise ExtractionError("Notion API authentication failed. Check the integration token.")
        if response.status_code in (403, 404):
            raise SourcePermissionError(
                "The requested Notion page was not found or is not shared with the integration.",
                source="this Notion page",
            )
        if response.status_code >= 400:
            raise ExtractionError(f"Notion API error: HTTP {response.status_code}")
        return response.json()

    async def extract(self, url: str) -> ExtractedContent:
        if not self._token:
            raise ExtractionError("Notion is not configured")
        page_id = page_id_from_url(url)
        if not page_id:
            raise ExtractionError(f"Could not find a Notion page id in {url}")

        lines: list[str] = []
        cursor: str | None = None
        while True:
            params: dict[str, Any] = {"page_size": 100}
            if cursor:
                params["start_cursor"] = cursor
            data = await self._get(f"/blocks/{page_id}/children", params)
            lines.extend(t for t in (block_text(b) for b in data.get("results", [])) if t)
            if not data.get("has_more"):
                break
            cursor = data.get("next_cursor")
        return await summarized(self._summarizer, "\n".join(lines), url)
