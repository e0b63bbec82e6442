"""Image description with an OpenAI vision model."""

import base64
import logging

import httpx
import openai
from openai import AsyncOpenAI

from slackrag.application.ports import ExtractedContent, Generator
from slackrag.domain.exceptions import ExtractionError
from slackrag.infrastructure.extraction.base import download, summarized

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_TYPES = ("image/png", "image/jpeg", "image/gif", "image/webp")

DESCRIBE_PROMPT = (
    "Describe this image in detail. Transcribe any text it contains and explain "
    "any charts, diagrams or screenshots."
)


class ImageDescriber:
    """Download an image with the bot token and have a vision model describe it."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        client: AsyncOpenAI,
        summarizer: Generator,
        model: str,
        bot_token: str = "",
        timeout: float = 30.0,
    ) -> None:
        self._http = http
        self._client = client
        self._summarizer = summarizer
        self._model = model
        self._bot_token = bot_token
        self._timeout = timeout

    async def describe(self, data: bytes, content_type: str) -> str:
        encoded = base64.b64encode(data).decode("ascii")
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": DESCRIBE_PROMPT},
                            {
                                "type": "image_url",
                                "image_url": {"url": f"data:{content_type};base64,{encoded}"},
                            },
                        ],
                    }
                ],
                timeout=self._timeout,
            )
        except openai.APIError as e:
            raise ExtractionError(f"Image description failed: {e}") from e
        return response.choices[0].message.content or ""

    async def extract(self, url: str) -> ExtractedContent:
        headers = {"Authorization": f"Bearer {self._bot_token}"} if self._bot_token else None
        response = await download(self._http, url, headers=headers, timeout=self._timeout)
        content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
        if content_type not in SUPPORTED_IMAGE_TYPES:
            raise ExtractionError(f"Unsupported image format: {content_type or 'unknown'}")
        description = await self.describe(response.content, content_type)
        return await summarized(self._summarizer, description, url)
