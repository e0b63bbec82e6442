"""Link router - pick the extractor for a URL by its host."""

import logging
from urllib.parse import urlparse

from slackrag.application.ports import ExtractedContent, LinkExtractor

logger = logging.getLogger(__name__)

GOOGLE_HOSTS = ("drive.google.com", "docs.google.com")


class LinkContentRouter:
    """Notion pages, Google Drive files, everything else as a web page."""

    def __init__(
        self,
        web: LinkExtractor,
        notion: LinkExtractor | None = None,
        drive: LinkExtractor | None = None,
    ) -> None:
        self._web = web
        self._notion = notion
        self._drive = drive

    def route(self, url: str) -> LinkExtractor:
        host = (urlparse(url).hostname or "").lower()
        if self._notion and (host == "notion.so" or host.endswith(".notion.so")):
            return self._notion
        if self._drive and host in GOOGLE_HOSTS:
            return self._drive
        return self._web

    async def extract(self, url: str) -> ExtractedContent:
        extractor = self.route(url)
        logger.info("Processing link %s with %s", url, type(extractor).__name__)
        return await extractor.extract(url)
