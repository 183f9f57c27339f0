"""Crypto Fear & Greed index client."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import httpx
from loguru import logger

from mayerprism.core.config import SentimentConfig
from mayerprism.core.config.settings import FEAR_GREED_URL
from mayerprism.core.exceptions import SentimentFetchError
from mayerprism.core.models import SentimentRecord, format_calendar_day

PROVIDER_NAME = "alternative.me"


def parse_sentiment_payload(payload: Any) -> list[SentimentRecord]:
    """Validate the response envelope and turn its entries into records.

    Entries missing a value, classification or timestamp are skipped, as are
    values that are not whole numbers between 0 and 100.
    """
    if not isinstance(payload, dict):
        raise SentimentFetchError("Response envelope is not an object", PROVIDER_NAME)

    metadata = payload.get("metadata") or {}
    if isinstance(metadata, dict) and metadata.get("error"):
        raise SentimentFetchError(f"Provider error: {metadata['error']}", PROVIDER_NAME)

    entries = payload.get("data")
    if not isinstance(entries, list):
        raise SentimentFetchError("Response envelope has no data list", PROVIDER_NAME)

    records: list[SentimentRecord] = []
    for entry in entries:
        record = _parse_entry(entry)
        if record is not None:
            records.append(record)
    return records


def _parse_entry(entry: Any) -> SentimentRecord | None:
    if not isinstance(entry, dict):
        return None
    raw_value = entry.get("value")
    classification = entry.get("value_classification")
    timestamp = entry.get("timestamp")
    if not raw_value or not classification or not timestamp:
        return None

    try:
        value = int(str(raw_value).strip())
        seconds = int(str(timestamp).strip())
    except ValueError:
        return None
    if not 0 <= value <= 100:
        return None

    label = str(classification).strip()
    if not label:
        return None
    try:
        day = datetime.fromtimestamp(seconds, UTC).date()
    except (OverflowError, OSError, ValueError):
        return None
    return SentimentRecord(date=format_calendar_day(day), value=value, classification=label)


class SentimentClient:
    """Single-attempt HTTP client for the sentiment index."""

    def __init__(
        self,
        url: str = FEAR_GREED_URL,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_config(cls, config: SentimentConfig) -> SentimentClient:
        return cls(url=config.url, timeout=config.timeout)

    async def fetch(self) -> list[SentimentRecord]:
        log = logger.bind(provider=PROVIDER_NAME)
        log.info("Fetching sentiment index")
        if self._client is not None:
            payload = await self._request(self._client)
        else:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                payload = await self._request(client)

        records = parse_sentiment_payload(payload)
        log.bind(records=len(records)).info("Parsed sentiment records")
        return records

    async def _request(self, client: httpx.AsyncClient) -> Any:
        try:
            response = await client.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise SentimentFetchError(f"Sentiment request timed out after {self.timeout}s", PROVIDER_NAME) from exc
        except httpx.HTTPStatusError as exc:
            raise SentimentFetchError(
                f"Sentiment request failed with status {exc.response.status_code}",
                PROVIDER_NAME,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise SentimentFetchError(f"Sentiment request failed: {exc}", PROVIDER_NAME) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise SentimentFetchError("Sentiment response is not valid JSON", PROVIDER_NAME) from exc


__all__ = ["SentimentClient", "parse_sentiment_payload"]
