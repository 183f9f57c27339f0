"""Snapshot pipeline: extract, enrich, filter, cache and archive."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from loguru import logger

from mayerprism.core.data.cache import ResultCache, SingleFlight
from mayerprism.core.data.providers import DocumentExtractor, SentimentClient
from mayerprism.core.data.storage import PersistenceStore
from mayerprism.core.exceptions import ExtractionError, MayerPrismError, PipelineError, SentimentFetchError
from mayerprism.core.logging import PerformanceLogger, log_context
from mayerprism.core.models import EnrichedRecord, PriceRecord, SentimentRecord

from .indicators import IndicatorCalculator
from .merge import Merger, RangeFilter

DEFAULT_CACHE_KEY = "bitcoin-data"


class PipelineStage(str, Enum):
    """Stages a run passes through, in order."""

    IDLE = "idle"
    CACHE_CHECK = "cache_check"
    HIT = "hit"
    MISS = "miss"
    ACQUIRE_RENDERER = "acquire_renderer"
    NAVIGATE = "navigate"
    WAIT_FOR_TABLE = "wait_for_table"
    EXTRACT = "extract"
    RELEASE_RENDERER = "release_renderer"
    FETCH_SENTIMENT = "fetch_sentiment"
    COMPUTE_INDICATOR = "compute_indicator"
    MERGE = "merge"
    FILTER = "filter"
    CACHE_WRITE = "cache_write"
    PERSIST = "persist"
    DONE = "done"
    FAILED = "failed"


class PersistenceStatus(str, Enum):
    SAVED = "saved"
    FAILED = "failed"
    SKIPPED = "skipped"
    PENDING = "pending"


@dataclass(frozen=True)
class PersistenceOutcome:
    """What happened to the best-effort archive write."""

    status: PersistenceStatus
    snapshot_id: str | None = None
    error: str | None = None


@dataclass
class PipelineResult:
    records: list[EnrichedRecord]
    cache_hit: bool
    stages: list[PipelineStage] = field(default_factory=list)
    persistence: PersistenceOutcome = field(default_factory=lambda: PersistenceOutcome(PersistenceStatus.SKIPPED))
    duration_ms: float = 0.0
    persistence_task: asyncio.Task[PersistenceOutcome] | None = field(default=None, repr=False, compare=False)

    async def persisted(self) -> PersistenceOutcome:
        """Wait for the archive write started by this run and return its outcome."""
        if self.persistence_task is None:
            return self.persistence
        return await asyncio.shield(self.persistence_task)

    def to_payload(self) -> list[dict[str, Any]]:
        return [record.to_payload() for record in self.records]


class Orchestrator:
    """Public entry point of the snapshot pipeline.

    Results are cached under one key for ``cache.ttl`` seconds. Concurrent
    callers that miss the cache share a single upstream run. Archive failures
    are logged and reported in :class:`PersistenceOutcome`; they never fail a
    run. The archive write runs in the background unless ``await_persistence``
    is set; :meth:`PipelineResult.persisted` and :meth:`drain` wait for it.
    """

    def __init__(
        self,
        extractor: DocumentExtractor,
        sentiment_client: SentimentClient,
        calculator: IndicatorCalculator | None = None,
        merger: Merger | None = None,
        range_filter: RangeFilter | None = None,
        cache: ResultCache | None = None,
        store: PersistenceStore | None = None,
        cache_key: str = DEFAULT_CACHE_KEY,
        concurrent_fetch: bool = False,
        await_persistence: bool = False,
    ):
        self.extractor = extractor
        self.sentiment_client = sentiment_client
        self.calculator = calculator if calculator is not None else IndicatorCalculator()
        self.merger = merger if merger is not None else Merger()
        self.range_filter = range_filter if range_filter is not None else RangeFilter()
        self.cache = cache if cache is not None else ResultCache()
        self.store = store
        self.cache_key = cache_key
        self.concurrent_fetch = concurrent_fetch
        self.await_persistence = await_persistence
        self._flight = SingleFlight()
        self._pending: set[asyncio.Task[PersistenceOutcome]] = set()

    async def get_records(self) -> list[EnrichedRecord]:
        return (await self.execute()).records

    @PerformanceLogger("pipeline_execute")
    async def execute(self) -> PipelineResult:
        with log_context(component="Orchestrator", cache_key=self.cache_key):
            started = time.perf_counter()
            stages = [PipelineStage.IDLE, PipelineStage.CACHE_CHECK]
            cached = await self.cache.get(self.cache_key)
            if cached is not None:
                logger.bind(records=len(cached)).info("Cache hit")
                stages += [PipelineStage.HIT, PipelineStage.DONE]
                return PipelineResult(list(cached), cache_hit=True, stages=stages, duration_ms=_elapsed(started))

            stages.append(PipelineStage.MISS)
            result = await self._flight.do(self.cache_key, self._refresh)
            return PipelineResult(
                records=list(result.records),
                cache_hit=result.cache_hit,
                stages=stages + result.stages,
                persistence=result.persistence,
                duration_ms=_elapsed(started),
                persistence_task=result.persistence_task,
            )

    async def _refresh(self) -> PipelineResult:
        # another flight may have filled the cache while this one was queued
        cached = await self.cache.get(self.cache_key)
        if cached is not None:
            return PipelineResult(list(cached), cache_hit=True, stages=[PipelineStage.HIT, PipelineStage.DONE])

        logger.info("Cache miss, running pipeline")
        started = time.perf_counter()
        stages: list[PipelineStage] = []
        try:
            prices, sentiments = await self._acquire(stages)

            stages.append(PipelineStage.COMPUTE_INDICATOR)
            indicators = self.calculator.compute(prices)
            stages.append(PipelineStage.MERGE)
            merged = self.merger.merge(indicators, sentiments)
            stages.append(PipelineStage.FILTER)
            records = self.range_filter.filter(merged)
        except MayerPrismError as exc:
            stages.append(PipelineStage.FAILED)
            failed_stage = exc.details.get("stage") or stages[-2].value
            logger.bind(stage=failed_stage, error_code=exc.error_code).error(f"Pipeline failed: {exc.message}")
            raise PipelineError(
                stage=failed_stage,
                details={"cause": exc.to_payload(), "stages": [s.value for s in stages]},
            ) from exc
        except Exception as exc:
            stages.append(PipelineStage.FAILED)
            failed_stage = stages[-2].value if len(stages) > 1 else PipelineStage.MISS.value
            logger.bind(stage=failed_stage).exception("Pipeline failed unexpectedly")
            raise PipelineError(stage=failed_stage, details={"stages": [s.value for s in stages]}) from exc

        stages.append(PipelineStage.CACHE_WRITE)
        await self.cache.put(self.cache_key, tuple(records))
        logger.bind(records=len(records)).info("Snapshot cached")

        stages.append(PipelineStage.PERSIST)
        stages.append(PipelineStage.DONE)
        if self.store is None:
            return PipelineResult(records, cache_hit=False, stages=stages)

        task = asyncio.create_task(self._persist(records, _elapsed(started)))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        if self.await_persistence:
            return PipelineResult(records, cache_hit=False, stages=stages, persistence=await asyncio.shield(task))
        return PipelineResult(
            records,
            cache_hit=False,
            stages=stages,
            persistence=PersistenceOutcome(PersistenceStatus.PENDING),
            persistence_task=task,
        )

    async def drain(self) -> None:
        """Wait for every archive write still running."""
        if self._pending:
            await asyncio.gather(*self._pending)

    async def _acquire(self, stages: list[PipelineStage]) -> tuple[list[PriceRecord], list[SentimentRecord]]:
        if not self.concurrent_fetch:
            prices = await self._extract(stages)
            stages.append(PipelineStage.FETCH_SENTIMENT)
            sentiments = await self.sentiment_client.fetch()
            return prices, sentiments

        extraction, sentiment = await asyncio.gather(
            self._extract(stages),
            self.sentiment_client.fetch(),
            return_exceptions=True,
        )
        stages.append(PipelineStage.FETCH_SENTIMENT)
        for outcome in (extraction, sentiment):
            if isinstance(outcome, BaseException):
                raise outcome
        return extraction, sentiment

    async def _extract(self, stages: list[PipelineStage]) -> list[PriceRecord]:
        stages.append(PipelineStage.ACQUIRE_RENDERER)
        try:
            prices = await self.extractor.extract()
        except ExtractionError as exc:
            stages.extend(_stages_until(exc.stage))
            stages.append(PipelineStage.RELEASE_RENDERER)
            raise
        stages += [
            PipelineStage.NAVIGATE,
            PipelineStage.WAIT_FOR_TABLE,
            PipelineStage.EXTRACT,
            PipelineStage.RELEASE_RENDERER,
        ]
        return prices

    async def _persist(self, records: list[EnrichedRecord], processing_ms: float) -> PersistenceOutcome:
        payload = [record.to_payload() for record in records]
        metadata = {
            "recordsCount": len(records),
            "dataRange": f"{records[0].date} to {records[-1].date}" if records else "",
            "processingTimeMs": processing_ms,
            "generatedAt": datetime.now(UTC).isoformat(),
        }
        try:
            snapshot_id = await asyncio.to_thread(self.store.save, payload, metadata)
        except Exception as exc:
            logger.bind(stage=PipelineStage.PERSIST.value).warning(f"Snapshot archive failed: {exc}")
            return PersistenceOutcome(PersistenceStatus.FAILED, error=str(exc))
        return PersistenceOutcome(PersistenceStatus.SAVED, snapshot_id=snapshot_id)


_EXTRACTION_STAGES = (PipelineStage.NAVIGATE, PipelineStage.WAIT_FOR_TABLE, PipelineStage.EXTRACT)


def _stages_until(stage: str) -> list[PipelineStage]:
    reached: list[PipelineStage] = []
    for candidate in _EXTRACTION_STAGES:
        reached.append(candidate)
        if candidate.value == stage:
            return reached
    return []


def _elapsed(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


__all__ = [
    "Orchestrator",
    "PipelineResult",
    "PipelineStage",
    "PersistenceOutcome",
    "PersistenceStatus",
    "DEFAULT_CACHE_KEY",
]
