"""Domain value objects."""

from slackrag.domain.value_objects.event_type import SLACK_EVENT_TYPES, EventType
from slackrag.domain.value_objects.extraction_result import ExtractionResult
from slackrag.domain.value_objects.links import (
    NOTION_LINK_RE,
    SPREADSHEET_LINK_RE,
    extract_links,
    unique,
)
from slackrag.domain.value_objects.search_filters import SearchFilters
from slackrag.domain.value_objects.segment_kind import SegmentKind
from slackrag.domain.value_objects.timestamps import days_since, permalink, ts_to_datetime

__all__ = [
    "NOTION_LINK_RE",
    "SLACK_EVENT_TYPES",
    "SPREADSHEET_LINK_RE",
    "EventType",
    "ExtractionResult",
    "SearchFilters",
    "SegmentKind",
    "days_since",
    "extract_links",
    "permalink",
    "ts_to_datetime",
    "unique",
]
