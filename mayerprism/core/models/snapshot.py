"""Archived snapshot models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_serializer


class SnapshotRecord(BaseModel):
    """一次流水线运行的归档记录."""

    id: str
    created_at: datetime
    data_type: str = "bitcoin-analysis"
    data: list[dict[str, Any]] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    expires_at: datetime | None = None

    @property
    def records_count(self) -> int:
        return int(self.metadata.get("recordsCount", len(self.data)))

    @field_serializer("created_at", "expires_at", when_used="json")
    def serialize_datetime(self, value: datetime | None) -> str | None:
        return value.isoformat() if value else None


class SnapshotSummary(BaseModel):
    id: str
    generated_at: str | None = None
    records_count: int | None = None


class SnapshotStats(BaseModel):
    """Aggregate view over the archive."""

    total_records: int = 0
    oldest_record: SnapshotSummary | None = None
    newest_record: SnapshotSummary | None = None
    average_records_count: int = 0


__all__ = ["SnapshotRecord", "SnapshotSummary", "SnapshotStats"]
