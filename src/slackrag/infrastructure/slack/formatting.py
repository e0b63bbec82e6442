"""Markdown to Slack Block Kit conversion."""

import re
from typing import Any

MAX_BLOCK_TEXT_LENGTH = 3000
MAX_HEADER_LENGTH = 150

_HEADER_RE = re.compile(r"^(#{1,6})\s+(.*)$")
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_ITALIC_RE = re.compile(r"(?<![*\w])\*(?!\*)([^*\n]+?)\*(?![*\w])")
_LIST_RE = re.compile(r"^\s*[-*+]\s+(.*)$", re.MULTILINE)
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def markdown_to_mrkdwn(text: str) -> str:
    """Convert common markdown to Slack mrkdwn."""
    text = _LIST_RE.sub(r"• \1", text)
    text = _ITALIC_RE.sub(r"_\1_", text)
    text = _BOLD_RE.sub(r"*\1*", text)
    return _LINK_RE.sub(r"<\2|\1>", text)


def split_text(text: str, limit: int = MAX_BLOCK_TEXT_LENGTH) -> list[str]:
    """Split on the last space before limit; hard split when there is none."""
    parts: list[str] = []
    while len(text) > limit:
        cut = text.rfind(" ", 0, limit)
        if cut <= 0:
            parts.append(text[:limit])
            text = text[limit:]
        else:
            parts.append(text[:cut])
            text = text[cut + 1 :]
    if text:
        parts.append(text)
    return parts


def _section(text: str) -> dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def format_message_with_blocks(text: str) -> list[dict[str, Any]]:
    """Markdown headers become header blocks, everything else mrkdwn sections."""
    blocks: list[dict[str, Any]] = []
    pending: list[str] = []

    def flush() -> None:
        body = "\n".join(pending).strip()
        pending.clear()
        if body:
            blocks.extend(_section(part) for part in split_text(markdown_to_mrkdwn(body)))

    for line in text.splitlines():
        match = _HEADER_RE.match(line)
        if match:
            flush()
            blocks.append(
                {
                    "type": "header",
                    "text": {
                        "type": "plain_text",
                        "text": match.group(2).strip()[:MAX_HEADER_LENGTH],
                        "emoji": True,
                    },
                }
            )
        else:
            pending.append(line)
    flush()
    return blocks
