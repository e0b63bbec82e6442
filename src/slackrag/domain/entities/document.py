"""Ingest document - ordered, provenance-tagged segments rendered to text for chunking."""

from dataclasses import dataclass, field

from slackrag.domain.value_objects import ExtractionResult, SegmentKind

DIVIDER = "--------------------------------"


@dataclass
class Segment:
    """One piece of an ingested document: message text or an extraction result."""

    kind: SegmentKind
    text: str = ""
    result: ExtractionResult | None = None

    @property
    def failed(self) -> bool:
        return self.result is not None and not self.result.ok

    def render(self) -> str:
        """Render to flat text. Failed extractions render as empty string."""
        if self.kind == SegmentKind.MESSAGE_TEXT:
            return f"{DIVIDER}\n{self.text.strip()}"
        if self.result is None or not self.result.ok:
            return ""
        r = self.result
        if self.kind == SegmentKind.LINK_RESULT:
            parts = [
                DIVIDER,
                f"Contents of Link: {r.source}",
                DIVIDER,
                f"Summary: {r.summary}",
                DIVIDER,
                f"Content: {r.content}",
            ]
        elif self.kind == SegmentKind.IMAGE_RESULT:
            parts = [
                DIVIDER,
                f"Image Description: {r.summary}",
                DIVIDER,
                f"Full Description: {r.content}",
            ]
        else:
            parts = [
                DIVIDER,
                f"PDF Summary: {r.summary}",
                DIVIDER,
                f"Full Content: {r.content}",
            ]
        return "\n".join(parts)


@dataclass
class IngestDocument:
    """Document assembled from a message or thread before storage."""

    channel_id: str
    thread_ts: str
    segments: list[Segment] = field(default_factory=list)

    def add_text(self, text: str) -> None:
        if text and text.strip():
            self.segments.append(Segment(kind=SegmentKind.MESSAGE_TEXT, text=text))

    def add_result(self, kind: SegmentKind, result: ExtractionResult) -> None:
        self.segments.append(Segment(kind=kind, result=result))

    @property
    def link_results(self) -> list[ExtractionResult]:
        return [
            s.result
            for s in self.segments
            if s.kind == SegmentKind.LINK_RESULT and s.result is not None
        ]

    @property
    def failures(self) -> list[ExtractionResult]:
        return [s.result for s in self.segments if s.failed and s.result is not None]

    def render(self) -> str:
        """Flat text handed to the chunker."""
        return "\n".join(r for r in (s.render() for s in self.segments) if r)
