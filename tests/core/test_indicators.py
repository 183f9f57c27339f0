"""Tests for the moving average and Mayer Multiple calculation."""

from datetime import date

import pytest

from mayerprism.core.models import PriceRecord
from mayerprism.core.services.indicators import IndicatorCalculator, parse_price, sort_chronologically


class TestParsePrice:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("9200", 9200.0),
            ("9,200.50", 9200.5),
            ("1,234,567.89", 1234567.89),
            (" 42.1 ", 42.1),
        ],
    )
    def test_parses_localized_numbers(self, text, expected):
        assert parse_price(text) == pytest.approx(expected)

    @pytest.mark.parametrize("text", ["", "-", "N/A", "abc", "inf", "nan"])
    def test_unparseable_is_absent_not_zero(self, text):
        assert parse_price(text) is None


class TestSorting:
    def test_sorts_ascending_by_calendar_day(self):
        records = [
            PriceRecord(date="Mar 1, 2021", open="1", close="3"),
            PriceRecord(date="Jan 15, 2021", open="1", close="1"),
            PriceRecord(date="Feb 2, 2021", open="1", close="2"),
        ]

        ordered = sort_chronologically(records)

        assert [r.close for r in ordered] == ["1", "2", "3"]

    def test_sort_is_stable_for_duplicate_days(self):
        records = [
            PriceRecord(date="Jan 2, 2021", open="1", close="first"),
            PriceRecord(date="Jan 1, 2021", open="1", close="earlier"),
            PriceRecord(date="Jan 2, 2021", open="1", close="second"),
        ]

        ordered = sort_chronologically(records)

        assert [r.close for r in ordered] == ["earlier", "first", "second"]

    def test_unreadable_dates_sort_last(self):
        records = [
            PriceRecord(date="not a date", open="1", close="x"),
            PriceRecord(date="Jan 1, 2021", open="1", close="y"),
        ]

        assert [r.close for r in sort_chronologically(records)] == ["y", "x"]


class TestIndicatorCalculator:
    def test_constant_closes_give_unit_multiple(self, price_factory):
        prices = price_factory(date(2020, 7, 1), ["9200"] * 200, open_price="9000")

        result = IndicatorCalculator().compute(prices)

        assert result[-1].moving_average_200 == pytest.approx(9200.0)
        assert result[-1].mayer_multiple == pytest.approx(1.0)

    def test_iso_dated_rows_are_supported(self):
        prices = [PriceRecord(date=f"2020-07-{day:02d}", open="9000", close="9200") for day in range(1, 4)]

        result = IndicatorCalculator(window=3).compute(list(reversed(prices)))

        assert [r.date for r in result] == ["2020-07-01", "2020-07-02", "2020-07-03"]
        assert result[-1].mayer_multiple == pytest.approx(1.0)

    def test_first_199_records_have_no_indicators(self, price_factory):
        prices = price_factory(date(2019, 1, 1), [str(100 + i) for i in range(250)])

        result = IndicatorCalculator().compute(prices)

        assert all(r.moving_average_200 is None and r.mayer_multiple is None for r in result[:199])
        assert all(r.moving_average_200 is not None for r in result[199:])

    def test_multiple_is_close_over_average(self, price_factory):
        closes = [f"{1000 + i * 7.5:,.2f}" for i in range(260)]
        prices = price_factory(date(2019, 1, 1), closes)

        result = IndicatorCalculator().compute(prices)

        for index in range(199, 260):
            window = [1000 + i * 7.5 for i in range(index - 199, index + 1)]
            expected_average = sum(window) / 200
            assert result[index].moving_average_200 == pytest.approx(expected_average)
            assert result[index].mayer_multiple == pytest.approx((1000 + index * 7.5) / expected_average)

    def test_unparseable_close_blanks_every_window_containing_it(self):
        closes = ["10", "10", "bad", "10", "10", "10"]
        prices = [PriceRecord(date=f"Jan {i + 1}, 2021", open="1", close=c) for i, c in enumerate(closes)]

        result = IndicatorCalculator(window=3).compute(prices)

        assert [r.moving_average_200 for r in result] == [None, None, None, None, None, pytest.approx(10.0)]
        assert result[5].mayer_multiple == pytest.approx(1.0)

    def test_zero_average_yields_no_multiple(self):
        prices = [PriceRecord(date=f"Jan {i + 1}, 2021", open="1", close="0") for i in range(3)]

        result = IndicatorCalculator(window=3).compute(prices)

        assert result[-1].moving_average_200 == 0.0
        assert result[-1].mayer_multiple is None

    def test_output_is_sorted_and_keeps_every_row(self, price_factory):
        prices = price_factory(date(2021, 1, 1), ["5"] * 10)

        result = IndicatorCalculator(window=3).compute(list(reversed(prices)))

        assert len(result) == len(prices)
        assert [r.day for r in result] == sorted(r.day for r in result)

    def test_empty_input(self):
        assert IndicatorCalculator().compute([]) == []

    def test_rejects_non_positive_window(self):
        with pytest.raises(ValueError):
            IndicatorCalculator(window=0)
