"""Ingestion DTOs."""

from dataclasses import dataclass, field

from slackrag.domain.entities import IngestDocument


@dataclass
class IngestionOutcome:
    """Result of running the ingestion pipeline on one event."""

    document: IngestDocument | None
    stored: bool = False
    chunk_ids: list[int] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.document is None
