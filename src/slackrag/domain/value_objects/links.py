"""URL discovery in message text."""

import re

# scheme + host + path characters only; no reachability check
LINK_RE = re.compile(r"https?://[0-9a-zA-Z\-./_]+")
NOTION_LINK_RE = re.compile(r"https://[^\s<>|]*notion\.so/[^\s<>|]*")
SPREADSHEET_LINK_RE = re.compile(r"https://[^\s<>|]*docs\.google\.com/spreadsheets/[^\s<>|]*")


def unique(items: list[str]) -> list[str]:
    """Drop repeats, keep first-seen order."""
    return list(dict.fromkeys(items))


def extract_links(text: str | None) -> list[str]:
    """Return URLs found in text in order of appearance, without repeats."""
    if not text:
        return []
    return unique([m.rstrip(".") for m in LINK_RE.findall(text)])
