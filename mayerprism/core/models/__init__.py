"""Data models module."""

from mayerprism.core.models.analysis import AnalysisReport, CurrentAnalysis, SnapshotMetadata
from mayerprism.core.models.records import (
    EnrichedRecord,
    IndicatorRecord,
    PriceRecord,
    SentimentRecord,
    format_calendar_day,
    parse_calendar_day,
)
from mayerprism.core.models.snapshot import SnapshotRecord, SnapshotStats, SnapshotSummary

__all__ = [
    "PriceRecord",
    "SentimentRecord",
    "IndicatorRecord",
    "EnrichedRecord",
    "format_calendar_day",
    "parse_calendar_day",
    "AnalysisReport",
    "CurrentAnalysis",
    "SnapshotMetadata",
    "SnapshotRecord",
    "SnapshotStats",
    "SnapshotSummary",
]
