"""OpenAI-compatible chat generator - summaries and answers."""

import logging

import openai
from openai import AsyncOpenAI

from slackrag.domain.exceptions import GenerationError
from slackrag.infrastructure.chunking.token_estimators import (
    TOKENS_PER_WORD,
    WordTokenEstimator,
)

logger = logging.getLogger(__name__)

SUMMARY_SYSTEM_PROMPT = "You are a helpful assistant that creates concise summaries."
SUMMARY_PROMPT = "Please provide a concise 3-4 sentence summary of the following content:\n\n{content}"

# Context window of the summary model minus room for prompt and reply.
SUMMARY_INPUT_TOKENS = 4096 - 1000


def limit_content(content: str, max_tokens: int) -> str:
    """Keep leading words so that words x 1.3 stays within max_tokens."""
    if WordTokenEstimator().estimate(content) <= max_tokens:
        return content
    return " ".join(content.split()[: int(max_tokens / TOKENS_PER_WORD)])


class OpenAIGenerator:
    """Summaries and answers through an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        max_tokens: int = 1000,
        timeout: float = 60.0,
        summary_input_tokens: int = SUMMARY_INPUT_TOKENS,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._client = client or AsyncOpenAI(base_url=base_url, api_key=api_key, timeout=timeout)
        self._model = model
        self._timeout = timeout
        self._max_tokens = max_tokens
        self._summary_input_tokens = summary_input_tokens

    async def _complete(self, messages: list[dict[str, str]]) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                max_completion_tokens=self._max_tokens,
                timeout=self._timeout,
            )
        except openai.APIError as e:
            logger.error("Chat completion failed: %s", e)
            raise GenerationError(f"Chat completion failed: {e}") from e
        text = response.choices[0].message.content if response.choices else None
        if not text:
            raise GenerationError("Chat completion returned no content")
        return text

    async def summarize(self, text: str) -> str:
        """Short summary of text; input is cut to the summary budget."""
        content = limit_content(text, self._summary_input_tokens)
        return await self._complete(
            [
                {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
                {"role": "user", "content": SUMMARY_PROMPT.format(content=content)},
            ]
        )

    async def answer(self, system_context: str, user_message: str) -> str:
        """Answer user_message given the system context."""
        return await self._complete(
            [
                {"role": "system", "content": system_context},
                {"role": "user", "content": user_message},
            ]
        )
