"""Token estimators - character and word based approximations."""

import math

CHARS_PER_TOKEN = 4
TOKENS_PER_WORD = 1.3


class CharacterTokenEstimator:
    """Roughly 4 characters per token for English text."""

    def __init__(self, chars_per_token: int = CHARS_PER_TOKEN) -> None:
        self._chars_per_token = chars_per_token

    def estimate(self, text: str) -> int:
        if not text:
            return 0
        return math.ceil(len(text) / self._chars_per_token)


class WordTokenEstimator:
    """Roughly 1.3 tokens per whitespace-separated word."""

    def __init__(self, tokens_per_word: float = TOKENS_PER_WORD) -> None:
        self._tokens_per_word = tokens_per_word

    def estimate(self, text: str) -> int:
        if not text:
            return 0
        return math.ceil(len(text.split()) * self._tokens_per_word)
