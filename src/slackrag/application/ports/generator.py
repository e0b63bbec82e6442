"""Generative model port - summaries and answers."""

from typing import Protocol


class Generator(Protocol):
    """Port for LLM calls. Implementations raise GenerationError."""

    async def summarize(self, text: str) -> str: ...

    async def answer(self, system_context: str, user_message: str) -> str: ...
