"""Pytest configuration for mayerprism test suite."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from mayerprism.core.models import PriceRecord, format_calendar_day


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--mayerprism-run-integration",
        action="store_true",
        default=False,
        help="Run mayerprism integration tests that require network access or a browser.",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register the integration marker for mayerprism tests."""

    config.addinivalue_line(
        "markers",
        "integration: marks mayerprism tests requiring network or external services",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--mayerprism-run-integration"):
        return

    skip_integration = pytest.mark.skip(
        reason="integration tests require --mayerprism-run-integration",
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def make_prices(start: date, closes: list[str], open_price: str = "9,000.00") -> list[PriceRecord]:
    """Daily price rows starting at ``start``, one per close."""
    return [
        PriceRecord(date=format_calendar_day(start + timedelta(days=offset)), open=open_price, close=close)
        for offset, close in enumerate(closes)
    ]


def render_table(rows: list[list[str]], css_class: str = "history") -> str:
    """HTML page holding one price table with the given body rows."""
    body = "".join("<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>" for row in rows)
    return (
        "<html><body>"
        f'<table class="{css_class}"><thead><tr><th>Date</th><th>Open</th><th>High</th>'
        "<th>Low</th><th>Close</th><th>Adj Close</th><th>Volume</th></tr></thead>"
        f"<tbody>{body}</tbody></table>"
        "</body></html>"
    )


@pytest.fixture
def price_factory():
    return make_prices


@pytest.fixture
def table_html():
    return render_table
