"""Wire a pipeline from configuration."""

from loguru import logger

from mayerprism.core.config import MayerPrismConfig
from mayerprism.core.data.cache import ResultCache
from mayerprism.core.data.providers import DocumentExtractor, SentimentClient
from mayerprism.core.data.storage import DuckDBSnapshotStore, PersistenceStore
from mayerprism.core.exceptions import PersistenceError

from .indicators import IndicatorCalculator
from .merge import Merger, RangeFilter
from .pipeline import Orchestrator


def build_store(config: MayerPrismConfig) -> PersistenceStore | None:
    """Open the configured archive, or ``None`` when archiving is disabled."""
    if not config.storage.enabled:
        return None
    return DuckDBSnapshotStore.from_path(config.storage.path, retention_days=config.storage.retention_days)


def build_orchestrator(config: MayerPrismConfig, store: PersistenceStore | None = None) -> Orchestrator:
    """Create an :class:`Orchestrator` with components configured from ``config``.

    An archive that cannot be opened only disables archiving.
    """
    if store is None and config.storage.enabled:
        try:
            store = build_store(config)
        except PersistenceError as exc:
            logger.warning(f"Snapshot archive unavailable, continuing without it: {exc.message}")

    return Orchestrator(
        extractor=DocumentExtractor.from_config(config.source),
        sentiment_client=SentimentClient.from_config(config.sentiment),
        calculator=IndicatorCalculator(window=config.pipeline.window),
        merger=Merger(),
        range_filter=RangeFilter(cutoff=config.cutoff_date),
        cache=ResultCache(ttl=config.pipeline.cache_ttl),
        store=store,
        cache_key=config.pipeline.cache_key,
        concurrent_fetch=config.pipeline.concurrent_fetch,
    )
