"""Tests for pipeline record models."""

from datetime import date

import pytest
from pydantic import ValidationError

from mayerprism.core.models import (
    EnrichedRecord,
    IndicatorRecord,
    PriceRecord,
    SentimentRecord,
    format_calendar_day,
    parse_calendar_day,
)


def test_format_calendar_day_has_no_padding():
    assert format_calendar_day(date(2024, 1, 5)) == "Jan 5, 2024"
    assert format_calendar_day(date(2023, 12, 25)) == "Dec 25, 2023"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Jan 5, 2024", date(2024, 1, 5)),
        ("Jan 05, 2024", date(2024, 1, 5)),
        ("September 3, 2021", date(2021, 9, 3)),
        ("2020-07-01", date(2020, 7, 1)),
        ("yesterday", None),
        ("", None),
    ],
)
def test_parse_calendar_day(text, expected):
    assert parse_calendar_day(text) == expected


def test_records_are_immutable():
    record = PriceRecord(date="Jan 1, 2024", open="1", close="2")

    with pytest.raises(ValidationError):
        record.close = "3"


def test_sentiment_value_bounds():
    with pytest.raises(ValidationError):
        SentimentRecord(date="Jan 1, 2024", value=101, classification="Extreme Greed")


def test_indicator_accepts_camel_case_input():
    record = IndicatorRecord.model_validate(
        {"date": "Jan 1, 2024", "open": "1", "close": "2", "movingAverage200": 1.5, "mayerMultiple": 1.33}
    )

    assert record.moving_average_200 == 1.5


def test_enriched_payload():
    indicator = IndicatorRecord(date="Jan 1, 2024", open="1", close="2", moving_average_200=1.0, mayer_multiple=2.0)
    sentiment = SentimentRecord(date="Jan 1, 2024", value=30, classification="Fear")

    payload = EnrichedRecord.from_indicator(indicator, sentiment).to_payload()

    assert payload == {
        "date": "Jan 1, 2024",
        "open": "1",
        "close": "2",
        "movingAverage200": 1.0,
        "mayerMultiple": 2.0,
        "sentimentValue": 30,
        "sentimentClassification": "Fear",
    }


def test_uncomputed_fields_are_omitted():
    payload = IndicatorRecord(date="Jan 1, 2024", open="1", close="2").to_payload()

    assert payload == {"date": "Jan 1, 2024", "open": "1", "close": "2"}
