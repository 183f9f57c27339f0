"""Sentiment join and date-range filtering."""

from collections.abc import Sequence
from datetime import date

from mayerprism.core.models import EnrichedRecord, IndicatorRecord, SentimentRecord

DEFAULT_CUTOFF = date(2020, 1, 1)


class Merger:
    """Left-join indicator rows with sentiment readings on the date key."""

    def merge(
        self,
        prices: Sequence[IndicatorRecord],
        sentiments: Sequence[SentimentRecord],
    ) -> list[EnrichedRecord]:
        by_date = {sentiment.date: sentiment for sentiment in sentiments}
        return [EnrichedRecord.from_indicator(price, by_date.get(price.date)) for price in prices]


class RangeFilter:
    """Keep rows on or after ``cutoff`` that have a Mayer Multiple."""

    def __init__(self, cutoff: date = DEFAULT_CUTOFF):
        self.cutoff = cutoff

    def filter(self, records: Sequence[EnrichedRecord]) -> list[EnrichedRecord]:
        return [record for record in records if self._keep(record)]

    def _keep(self, record: EnrichedRecord) -> bool:
        day = record.day
        return day is not None and day >= self.cutoff and record.mayer_multiple is not None


__all__ = ["Merger", "RangeFilter", "DEFAULT_CUTOFF"]
