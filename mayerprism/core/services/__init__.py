"""Pipeline services."""

from mayerprism.core.services.analysis import summarize
from mayerprism.core.services.factory import build_orchestrator, build_store
from mayerprism.core.services.indicators import IndicatorCalculator, parse_price
from mayerprism.core.services.merge import Merger, RangeFilter
from mayerprism.core.services.pipeline import (
    Orchestrator,
    PersistenceOutcome,
    PersistenceStatus,
    PipelineResult,
    PipelineStage,
)

__all__ = [
    "IndicatorCalculator",
    "Merger",
    "build_orchestrator",
    "build_store",
    "Orchestrator",
    "PersistenceOutcome",
    "PersistenceStatus",
    "PipelineResult",
    "PipelineStage",
    "RangeFilter",
    "parse_price",
    "summarize",
]
