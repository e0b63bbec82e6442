"""Kinds of segments an ingested document is built from."""

from enum import StrEnum


class SegmentKind(StrEnum):
    """Provenance tag of a document segment."""

    MESSAGE_TEXT = "message_text"
    LINK_RESULT = "link_result"
    IMAGE_RESULT = "image_result"
    PDF_RESULT = "pdf_result"
