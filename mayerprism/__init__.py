"""mayerprism - Bitcoin valuation snapshots

Scrapes the daily BTC-USD history, computes the 200-day moving average and
Mayer Multiple, joins the Crypto Fear & Greed index and caches the result.
"""

import asyncio

from mayerprism.core.config import ConfigManager, MayerPrismConfig
from mayerprism.core.models import AnalysisReport, EnrichedRecord
from mayerprism.core.services import Orchestrator, PipelineResult, build_orchestrator, summarize

# 全局流水线实例
_orchestrator: Orchestrator | None = None


def get_orchestrator() -> Orchestrator:
    """获取全局流水线实例"""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = build_orchestrator(ConfigManager().get_config())
    return _orchestrator


def configure(config: MayerPrismConfig) -> Orchestrator:
    """Replace the global pipeline with one built from ``config``."""
    global _orchestrator
    _orchestrator = build_orchestrator(config)
    return _orchestrator


async def get_records_async() -> list[EnrichedRecord]:
    """异步获取过滤后的快照

    Examples:
        >>> import asyncio
        >>> import mayerprism
        >>> records = asyncio.run(mayerprism.get_records_async())
        >>> records[-1].mayer_multiple
    """
    return await get_orchestrator().get_records()


async def _get_records_and_drain() -> list[EnrichedRecord]:
    orchestrator = get_orchestrator()
    try:
        return await orchestrator.get_records()
    finally:
        await orchestrator.drain()


def get_records() -> list[EnrichedRecord]:
    """同步获取过滤后的快照

    The event loop closes on return, so the archive write is awaited first.
    """
    return asyncio.run(_get_records_and_drain())


def analyze() -> AnalysisReport:
    """Run the pipeline and summarize its newest record."""
    return summarize(get_records())


__version__ = "0.1.0"

__all__ = [
    "EnrichedRecord",
    "MayerPrismConfig",
    "Orchestrator",
    "PipelineResult",
    "analyze",
    "configure",
    "get_orchestrator",
    "get_records",
    "get_records_async",
]
