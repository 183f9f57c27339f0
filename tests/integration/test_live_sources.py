"""Live checks against the real quote page and sentiment index."""

import pytest

from mayerprism.core.config import MayerPrismConfig, SentimentConfig, SourceConfig
from mayerprism.core.data.providers import DocumentExtractor, SentimentClient
from mayerprism.core.services import build_orchestrator


@pytest.mark.integration
class TestLiveSources:
    @pytest.mark.asyncio
    async def test_sentiment_index(self):
        """The public index returns recent readings."""
        records = await SentimentClient.from_config(SentimentConfig()).fetch()

        assert len(records) > 365
        assert all(0 <= r.value <= 100 for r in records)

    @pytest.mark.asyncio
    async def test_price_history_with_browser(self):
        """Headless Chromium renders the history table."""
        records = await DocumentExtractor.from_config(SourceConfig()).extract()

        assert len(records) > 200
        assert all(r.day is not None for r in records)

    @pytest.mark.asyncio
    async def test_full_pipeline(self, tmp_path):
        """End-to-end run archives one snapshot."""
        config = MayerPrismConfig.from_dict({"storage": {"path": str(tmp_path / "snapshots.duckdb")}})
        orchestrator = build_orchestrator(config)

        result = await orchestrator.execute()
        await result.persisted()

        assert result.records
        assert result.records[0].day >= config.cutoff_date
        assert orchestrator.store.get_latest().records_count == len(result.records)
