"""Trailing moving average and Mayer Multiple."""

import math
from collections.abc import Sequence
from datetime import date

import pandas as pd

from mayerprism.core.logging import PerformanceLogger
from mayerprism.core.models import IndicatorRecord, PriceRecord

DEFAULT_WINDOW = 200


def parse_price(text: str) -> float | None:
    """Parse localized price text such as ``"9,200.50"``; ``None`` if it is not a finite number."""
    try:
        value = float(text.replace(",", "").strip())
    except (AttributeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def sort_chronologically(prices: Sequence[PriceRecord]) -> list[PriceRecord]:
    """Stable ascending sort by calendar day; rows with unreadable dates go last."""
    return sorted(prices, key=_sort_key)


def _sort_key(record: PriceRecord) -> tuple[bool, date]:
    day = record.day
    return (day is None, day or date.min)


class IndicatorCalculator:
    """Compute the trailing average over ``window`` closes and the price/average ratio."""

    def __init__(self, window: int = DEFAULT_WINDOW):
        if window < 1:
            raise ValueError("window must be at least 1")
        self.window = window

    @PerformanceLogger("compute_indicators")
    def compute(self, prices: Sequence[PriceRecord]) -> list[IndicatorRecord]:
        ordered = sort_chronologically(prices)
        if not ordered:
            return []

        closes = pd.Series([parse_price(record.close) for record in ordered], dtype="float64")
        # min_periods == window: any missing close inside the window yields NaN
        averages = closes.rolling(window=self.window, min_periods=self.window).mean()

        results: list[IndicatorRecord] = []
        for record, close, average in zip(ordered, closes, averages, strict=True):
            moving_average = _finite(average)
            mayer = None
            if moving_average is not None and moving_average != 0:
                mayer = _finite(close / moving_average)
            results.append(
                IndicatorRecord(
                    **record.model_dump(),
                    moving_average_200=moving_average,
                    mayer_multiple=mayer,
                )
            )
        return results


def _finite(value: float) -> float | None:
    return float(value) if math.isfinite(value) else None


__all__ = ["IndicatorCalculator", "parse_price", "sort_chronologically", "DEFAULT_WINDOW"]
