"""Archive commands for the mayerprism CLI."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import typer

from mayerprism.core.config import MayerPrismConfig
from mayerprism.core.data.storage import DuckDBSnapshotStore, PersistenceStore
from mayerprism.core.exceptions import NotFoundError, PersistenceError
from mayerprism.core.models import SnapshotRecord

from .constants import NOT_FOUND_EXIT_CODE, SYSTEM_EXIT_CODE, VALIDATION_EXIT_CODE
from .utils import emit_error, load_config, prepare_output

snapshots_app = typer.Typer(help="Archived snapshot operations.")

DEFAULT_LIMIT = 10
MAX_LIMIT = 100

LIST_COLUMNS = ["id", "savedAt", "recordsCount", "dataRange", "processingTimeMs"]


def register(app: typer.Typer) -> None:
    """Register the snapshots command group on the provided application."""

    app.add_typer(snapshots_app, name="snapshots", help="Query archived pipeline snapshots")


def get_store(config: MayerPrismConfig) -> PersistenceStore:
    """Factory hook for obtaining the snapshot archive."""

    return DuckDBSnapshotStore.from_path(config.storage.path, retention_days=config.storage.retention_days)


def clamp_limit(limit: int | None) -> int:
    if limit is None or limit < 1:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


def _open_store(ctx: typer.Context) -> PersistenceStore:
    config = load_config(ctx)
    if not config.storage.enabled:
        emit_error("Snapshot archive is disabled in configuration.", "STORAGE_DISABLED")
        raise typer.Exit(code=VALIDATION_EXIT_CODE)
    try:
        return get_store(config)
    except PersistenceError as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=SYSTEM_EXIT_CODE) from error


@contextmanager
def _archive(ctx: typer.Context) -> Iterator[PersistenceStore]:
    """Open the archive for one command and close it afterwards."""
    store = _open_store(ctx)
    try:
        yield store
    except NotFoundError as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=NOT_FOUND_EXIT_CODE) from error
    except PersistenceError as error:
        emit_error(error.message, error.error_code)
        raise typer.Exit(code=SYSTEM_EXIT_CODE) from error
    finally:
        store.close()


def _summary_row(record: SnapshotRecord) -> dict[str, object]:
    return {
        "id": record.id,
        "savedAt": record.metadata.get("generatedAt"),
        "recordsCount": record.records_count,
        "dataRange": record.metadata.get("dataRange"),
        "processingTimeMs": record.metadata.get("processingTimeMs"),
    }


def _render_snapshot(ctx: typer.Context, record: SnapshotRecord | None, missing: str, **details: str) -> None:
    if record is None:
        raise NotFoundError(missing, details=details or None)
    formatter, stream, stack, _ = prepare_output(ctx)
    with stack:
        formatter.render(record.data, stream=stream)


@snapshots_app.command("latest")
def latest_command(ctx: typer.Context) -> None:
    """Print the records of the most recent snapshot."""

    with _archive(ctx) as store:
        _render_snapshot(ctx, store.get_latest(), "No snapshot found in the archive.")


@snapshots_app.command("show")
def show_command(ctx: typer.Context, snapshot_id: str = typer.Argument(..., help="Snapshot id.")) -> None:
    """Print the records of one snapshot."""

    with _archive(ctx) as store:
        record = store.get_by_id(snapshot_id)
        _render_snapshot(ctx, record, f"No snapshot found with id: {snapshot_id}", snapshot_id=snapshot_id)


@snapshots_app.command("list")
def list_command(
    ctx: typer.Context,
    limit: int = typer.Option(DEFAULT_LIMIT, "--limit", help="Number of snapshots to list (1-100)."),
) -> None:
    """List the most recent snapshots."""

    with _archive(ctx) as store:
        records = store.list(clamp_limit(limit))

    formatter, stream, stack, _ = prepare_output(ctx)
    with stack:
        formatter.render([_summary_row(record) for record in records], stream=stream, columns=LIST_COLUMNS)


@snapshots_app.command("stats")
def stats_command(ctx: typer.Context) -> None:
    """Print aggregate statistics of the archive."""

    with _archive(ctx) as store:
        stats = store.stats()

    row = {
        "totalRecords": stats.total_records,
        "averageRecordsCount": stats.average_records_count,
        "oldestId": stats.oldest_record.id if stats.oldest_record else None,
        "oldestGeneratedAt": stats.oldest_record.generated_at if stats.oldest_record else None,
        "newestId": stats.newest_record.id if stats.newest_record else None,
        "newestGeneratedAt": stats.newest_record.generated_at if stats.newest_record else None,
    }
    formatter, stream, stack, _ = prepare_output(ctx)
    with stack:
        formatter.render([row], stream=stream)


@snapshots_app.command("purge")
def purge_command(ctx: typer.Context) -> None:
    """Delete expired snapshots from the archive."""

    with _archive(ctx) as store:
        removed = store.purge_expired()

    formatter, stream, stack, _ = prepare_output(ctx)
    with stack:
        formatter.render([{"removed": removed}], stream=stream)


__all__ = ["register", "get_store", "clamp_limit"]
