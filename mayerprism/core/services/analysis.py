"""Current-analysis summary derived from the newest record."""

from collections.abc import Sequence
from datetime import UTC, datetime

from mayerprism.core.exceptions import PipelineError
from mayerprism.core.models import AnalysisReport, CurrentAnalysis, EnrichedRecord, SnapshotMetadata

from .indicators import parse_price

UNDERVALUED_BELOW = 1.0
OVERVALUED_ABOVE = 2.4
EXTREME_FEAR_MAX = 24
EXTREME_GREED_MIN = 75


def mayer_status(mayer: float | None) -> str:
    if not mayer:
        return "N/A"
    if mayer < UNDERVALUED_BELOW:
        return "Undervalued"
    if mayer <= OVERVALUED_ABOVE:
        return "Neutral"
    return "Overvalued"


def sentiment_emoji(value: int) -> str:
    if value <= EXTREME_FEAR_MAX:
        return "😨"
    if value <= 49:
        return "😟"
    if value <= 74:
        return "😊"
    return "🤑"


def sentiment_status(value: int | None, classification: str | None) -> str:
    if not value:
        return "N/A"
    return f"{sentiment_emoji(value)} {classification or ''}".rstrip()


def _signals(mayer: float, sentiment: int) -> tuple[bool, bool, bool, bool]:
    return (
        mayer < UNDERVALUED_BELOW,
        mayer > OVERVALUED_ABOVE,
        sentiment <= EXTREME_FEAR_MAX,
        sentiment >= EXTREME_GREED_MIN,
    )


def recommendation(mayer: float | None, sentiment: int | None) -> str:
    if not mayer or not sentiment:
        return "Insufficient data"
    low_mayer, high_mayer, extreme_fear, extreme_greed = _signals(mayer, sentiment)
    if low_mayer and extreme_fear:
        return "Strong Buy: Exceptional opportunity"
    if high_mayer and extreme_greed:
        return "High Caution: Elevated risk"
    if low_mayer or extreme_fear:
        return "Moderate Buy: Favorable indicator"
    if high_mayer or extreme_greed:
        return "Caution: Unfavorable indicator"
    return "Neutral: Wait for clearer signals"


def confidence_level(mayer: float | None, sentiment: int | None) -> str:
    if not mayer or not sentiment:
        return "Low"
    low_mayer, high_mayer, extreme_fear, extreme_greed = _signals(mayer, sentiment)
    if (low_mayer and extreme_fear) or (high_mayer and extreme_greed):
        return "High"
    if low_mayer or high_mayer or extreme_fear or extreme_greed:
        return "Medium"
    return "Low"


def summarize(records: Sequence[EnrichedRecord], now: datetime | None = None) -> AnalysisReport:
    """Build the report callers show next to a snapshot."""
    if not records:
        raise PipelineError("No data available to analyze")

    latest, oldest = records[-1], records[0]
    current = CurrentAnalysis(
        price=parse_price(latest.close),
        mayer_multiple=latest.mayer_multiple,
        mayer_status=mayer_status(latest.mayer_multiple),
        sentiment_value=latest.sentiment_value,
        sentiment_status=sentiment_status(latest.sentiment_value, latest.sentiment_classification),
        recommendation=recommendation(latest.mayer_multiple, latest.sentiment_value),
        confidence_level=confidence_level(latest.mayer_multiple, latest.sentiment_value),
    )
    meta = SnapshotMetadata(
        total_records=len(records),
        data_range=f"{oldest.date} to {latest.date}",
        last_update=(now or datetime.now(UTC)).isoformat(),
    )
    return AnalysisReport(meta=meta, current_analysis=current)


__all__ = ["summarize", "mayer_status", "sentiment_status", "recommendation", "confidence_level"]
