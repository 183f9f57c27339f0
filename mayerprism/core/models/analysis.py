"""Summary models derived from the newest record of a snapshot."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Summary(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class CurrentAnalysis(_Summary):
    """Valuation and sentiment reading of the latest day."""

    price: float | None
    mayer_multiple: float | None
    mayer_status: str
    sentiment_value: int | None
    sentiment_status: str
    recommendation: str
    confidence_level: str


class SnapshotMetadata(_Summary):
    total_records: int
    data_range: str
    last_update: str


class AnalysisReport(_Summary):
    meta: SnapshotMetadata
    current_analysis: CurrentAnalysis


__all__ = ["CurrentAnalysis", "SnapshotMetadata", "AnalysisReport"]
