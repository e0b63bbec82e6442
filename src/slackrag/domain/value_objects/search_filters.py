"""Optional filters for similarity search."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SearchFilters:
    """Equality filters on channel/user, inclusive range on creation time."""

    channel: str | None = None
    user: str | None = None
    min_date: datetime | None = None
    max_date: datetime | None = None
