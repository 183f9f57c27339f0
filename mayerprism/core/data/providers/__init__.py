"""Upstream data sources: the rendered price page and the sentiment API."""

from mayerprism.core.data.providers.history import DocumentExtractor, build_history_url, parse_price_table
from mayerprism.core.data.providers.renderer import (
    Document,
    PageRenderer,
    PlaywrightPageRenderer,
    StaticDocument,
    StaticPageRenderer,
    create_renderer,
)
from mayerprism.core.data.providers.sentiment import SentimentClient, parse_sentiment_payload

__all__ = [
    "Document",
    "DocumentExtractor",
    "PageRenderer",
    "PlaywrightPageRenderer",
    "SentimentClient",
    "StaticDocument",
    "StaticPageRenderer",
    "build_history_url",
    "create_renderer",
    "parse_price_table",
    "parse_sentiment_payload",
]
