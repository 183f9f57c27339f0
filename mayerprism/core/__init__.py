"""mayerprism 核心模块"""

from mayerprism.core.config import ConfigManager, MayerPrismConfig
from mayerprism.core.models import EnrichedRecord, IndicatorRecord, PriceRecord, SentimentRecord
from mayerprism.core.services import Orchestrator, PipelineResult, build_orchestrator

__all__ = [
    "ConfigManager",
    "MayerPrismConfig",
    "EnrichedRecord",
    "IndicatorRecord",
    "PriceRecord",
    "SentimentRecord",
    "Orchestrator",
    "PipelineResult",
    "build_orchestrator",
]
