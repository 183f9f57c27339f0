"""Pipeline commands: run the snapshot pipeline and summarize it."""

from __future__ import annotations

import asyncio

import typer
from loguru import logger

from mayerprism.core.config import MayerPrismConfig
from mayerprism.core.exceptions import MayerPrismError
from mayerprism.core.services import Orchestrator, PipelineResult, build_orchestrator, summarize

from .constants import ACQUISITION_EXIT_CODE, GENERIC_FAILURE_MESSAGE, SYSTEM_EXIT_CODE
from .utils import emit_error, load_config, prepare_output

RECORD_COLUMNS = [
    "date",
    "open",
    "close",
    "movingAverage200",
    "mayerMultiple",
    "sentimentValue",
    "sentimentClassification",
]


def register(app: typer.Typer) -> None:
    """Register pipeline commands on the provided application."""

    app.command("run")(run_command)
    app.command("analyze")(analyze_command)


def get_orchestrator(config: MayerPrismConfig) -> Orchestrator:
    """Factory hook for obtaining an :class:`Orchestrator` instance."""

    return build_orchestrator(config)


async def _run_and_drain(orchestrator: Orchestrator) -> PipelineResult:
    try:
        return await orchestrator.execute()
    finally:
        await orchestrator.drain()


def _execute(config: MayerPrismConfig) -> PipelineResult:
    orchestrator = get_orchestrator(config)
    try:
        return asyncio.run(_run_and_drain(orchestrator))
    except MayerPrismError as error:
        logger.bind(error_code=error.error_code).error(f"Pipeline run failed: {error.details}")
        emit_error(GENERIC_FAILURE_MESSAGE, error.error_code)
        raise typer.Exit(code=ACQUISITION_EXIT_CODE) from error
    except Exception as error:  # pragma: no cover - safety net
        logger.exception("Unexpected pipeline failure")
        emit_error(GENERIC_FAILURE_MESSAGE, "UNEXPECTED_ERROR")
        raise typer.Exit(code=SYSTEM_EXIT_CODE) from error


def run_command(
    ctx: typer.Context,
    tail: int = typer.Option(0, "--tail", min=0, help="Only print the newest N records (0 prints all)."),
) -> None:
    """Run the pipeline and print the filtered records."""

    config = load_config(ctx)
    result = _execute(config)
    rows = result.to_payload()
    if tail:
        rows = rows[-tail:]

    formatter, stream, stack, _ = prepare_output(ctx)
    with stack:
        formatter.render(rows, stream=stream, columns=RECORD_COLUMNS)


def analyze_command(ctx: typer.Context) -> None:
    """Run the pipeline and print the current valuation and sentiment reading."""

    config = load_config(ctx)
    result = _execute(config)
    try:
        report = summarize(result.records)
    except MayerPrismError as error:
        emit_error(error.message, error.error_code)
        raise typer.Exit(code=ACQUISITION_EXIT_CODE) from error

    summary = {
        **report.meta.model_dump(by_alias=True),
        **report.current_analysis.model_dump(by_alias=True),
    }
    formatter, stream, stack, _ = prepare_output(ctx)
    with stack:
        formatter.render([summary], stream=stream)


__all__ = ["register", "get_orchestrator", "run_command", "analyze_command"]
