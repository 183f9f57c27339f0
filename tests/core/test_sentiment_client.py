"""Tests for the Fear & Greed client."""

import httpx
import pytest

from mayerprism.core.data.providers import SentimentClient, parse_sentiment_payload
from mayerprism.core.exceptions import SentimentFetchError

JAN_1_2024 = 1704067200
DAY = 86400


def _entry(value="45", classification="Fear", timestamp=JAN_1_2024):
    return {"value": value, "value_classification": classification, "timestamp": str(timestamp)}


def _client(handler) -> SentimentClient:
    transport = httpx.MockTransport(handler)
    return SentimentClient(url="https://fng.example.test/", timeout=5.0, client=httpx.AsyncClient(transport=transport))


class TestParseSentimentPayload:
    def test_parses_entries_in_utc(self):
        payload = {
            "name": "Fear and Greed Index",
            "data": [_entry(), _entry("71", "Greed", JAN_1_2024 + DAY - 1)],
            "metadata": {"error": None},
        }

        records = parse_sentiment_payload(payload)

        assert [(r.date, r.value, r.classification) for r in records] == [
            ("Jan 1, 2024", 45, "Fear"),
            ("Jan 1, 2024", 71, "Greed"),
        ]

    def test_drops_unusable_entries(self):
        payload = {
            "data": [
                _entry(value="abc"),
                _entry(value="45.5"),
                _entry(value="101"),
                _entry(value="-1"),
                _entry(value=""),
                _entry(classification=""),
                _entry(classification="   "),
                {"value": "10", "value_classification": "Extreme Fear"},
                _entry(timestamp="soon"),
                "not-an-object",
                _entry(value="0", classification=" Extreme Fear "),
                _entry(value="100", classification="Extreme Greed", timestamp=JAN_1_2024 + DAY),
            ]
        }

        records = parse_sentiment_payload(payload)

        assert [(r.date, r.value, r.classification) for r in records] == [
            ("Jan 1, 2024", 0, "Extreme Fear"),
            ("Jan 2, 2024", 100, "Extreme Greed"),
        ]

    def test_provider_error_field(self):
        with pytest.raises(SentimentFetchError, match="rate limited"):
            parse_sentiment_payload({"data": [], "metadata": {"error": "rate limited"}})

    @pytest.mark.parametrize("payload", [[], "text", {"metadata": {}}, {"data": "nope"}])
    def test_malformed_envelope(self, payload):
        with pytest.raises(SentimentFetchError):
            parse_sentiment_payload(payload)

    def test_empty_data_is_not_an_error(self):
        assert parse_sentiment_payload({"data": [], "metadata": {"error": None}}) == []


class TestSentimentClient:
    @pytest.mark.asyncio
    async def test_fetch(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.host == "fng.example.test"
            return httpx.Response(200, json={"data": [_entry()], "metadata": {"error": None}})

        records = await _client(handler).fetch()

        assert records[0].value == 45

    @pytest.mark.asyncio
    async def test_provider_reports_error(self):
        def handler(request):
            return httpx.Response(200, json={"data": [], "metadata": {"error": "rate limited"}})

        with pytest.raises(SentimentFetchError) as exc_info:
            await _client(handler).fetch()

        assert exc_info.value.provider_name == "alternative.me"

    @pytest.mark.asyncio
    async def test_http_status_error(self):
        def handler(request):
            return httpx.Response(503, text="unavailable")

        with pytest.raises(SentimentFetchError) as exc_info:
            await _client(handler).fetch()

        assert exc_info.value.status_code == 503
        assert exc_info.value.details["status_code"] == 503

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(SentimentFetchError, match="timed out"):
            await _client(handler).fetch()

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(SentimentFetchError):
            await _client(handler).fetch()

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, text="<html>not json</html>")

        with pytest.raises(SentimentFetchError, match="not valid JSON"):
            await _client(handler).fetch()
