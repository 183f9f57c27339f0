"""Record models flowing through the snapshot pipeline.

Each pipeline stage produces its own model: ``PriceRecord`` from the page,
``IndicatorRecord`` once the moving average is known, ``EnrichedRecord`` once
sentiment has been joined. Optional fields stay ``None`` until their stage
computed them, and are left out of serialized payloads.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_DATE_FORMATS = ("%b %d, %Y", "%B %d, %Y", "%Y-%m-%d")


def format_calendar_day(day: date) -> str:
    """Render a day as the shared join key, e.g. ``Jan 5, 2024``."""
    return f"{day:%b} {day.day}, {day.year}"


def parse_calendar_day(text: str) -> date | None:
    """Parse a date key back into a :class:`date`, ``None`` if it is not one."""
    value = text.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


class _Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting fields not yet computed."""
        return self.model_dump(by_alias=True, exclude_none=True)


class PriceRecord(_Record):
    """一行价格表数据."""

    date: str
    open: str
    close: str

    @property
    def day(self) -> date | None:
        return parse_calendar_day(self.date)


class SentimentRecord(_Record):
    """情绪指数记录."""

    date: str
    value: int = Field(ge=0, le=100)
    classification: str


class IndicatorRecord(PriceRecord):
    """Price row with its trailing moving average and Mayer Multiple."""

    moving_average_200: float | None = Field(default=None, alias="movingAverage200")
    mayer_multiple: float | None = None


class EnrichedRecord(IndicatorRecord):
    """Indicator row joined with the sentiment reading for the same day."""

    sentiment_value: int | None = None
    sentiment_classification: str | None = None

    @classmethod
    def from_indicator(
        cls,
        record: IndicatorRecord,
        sentiment: SentimentRecord | None = None,
    ) -> "EnrichedRecord":
        return cls(
            **record.model_dump(),
            sentiment_value=sentiment.value if sentiment else None,
            sentiment_classification=sentiment.classification if sentiment else None,
        )


__all__ = [
    "PriceRecord",
    "SentimentRecord",
    "IndicatorRecord",
    "EnrichedRecord",
    "format_calendar_day",
    "parse_calendar_day",
]
