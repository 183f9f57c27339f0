"""DuckDB-backed snapshot archive."""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from threading import Lock
from typing import Any

import duckdb
from loguru import logger

from mayerprism.core.exceptions import PersistenceError
from mayerprism.core.models import SnapshotRecord, SnapshotStats, SnapshotSummary

from .duckdb_factory import DuckDBFactory, DuckDBFactoryConfig

DATA_TYPE = "bitcoin-analysis"

_COLUMNS = "id, created_at, data_type, payload, metadata, expires_at"


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class DuckDBSnapshotStore:
    """Archive of pipeline snapshots in a single ``snapshots`` table.

    Rows may carry an expiry; expired rows are invisible to reads. Every
    :meth:`save` calls :meth:`purge_expired`, which deletes them.
    """

    def __init__(
        self,
        factory: DuckDBFactory | None = None,
        retention_days: int | None = 30,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.factory = factory or DuckDBFactory()
        self.retention_days = retention_days
        self._clock = clock
        self._lock = Lock()
        try:
            self.connection = self.factory.create_connection()
            self._create_tables()
        except duckdb.Error as exc:
            raise PersistenceError(f"Failed to open snapshot store: {exc}", operation="connect") from exc

    @classmethod
    def from_path(cls, path: str, retention_days: int | None = 30) -> DuckDBSnapshotStore:
        return cls(DuckDBFactory(DuckDBFactoryConfig(database=path)), retention_days=retention_days)

    def _create_tables(self) -> None:
        self.connection.execute("""
            CREATE TABLE IF NOT EXISTS snapshots (
                id VARCHAR PRIMARY KEY,
                created_at TIMESTAMP NOT NULL,
                data_type VARCHAR NOT NULL,
                payload JSON NOT NULL,
                metadata JSON NOT NULL,
                records_count INTEGER,
                expires_at TIMESTAMP
            )
        """)
        self.connection.execute("CREATE INDEX IF NOT EXISTS idx_snapshots_created ON snapshots(created_at)")

    def close(self) -> None:
        with self._lock:
            self.connection.close()

    def save(self, payload: list[dict[str, Any]], metadata: dict[str, Any]) -> str:
        """Store one snapshot and return its id."""
        snapshot_id = str(uuid.uuid4())
        created_at = self._clock()
        expires_at = created_at + timedelta(days=self.retention_days) if self.retention_days else None
        full_metadata = {
            **metadata,
            "generatedAt": metadata.get("generatedAt") or created_at.replace(tzinfo=UTC).isoformat(),
        }
        records_count = int(full_metadata.get("recordsCount", len(payload)))

        try:
            with self._lock:
                self.connection.execute(
                    """
                    INSERT INTO snapshots (id, created_at, data_type, payload, metadata, records_count, expires_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        snapshot_id,
                        created_at,
                        DATA_TYPE,
                        json.dumps(payload, ensure_ascii=False),
                        json.dumps(full_metadata, ensure_ascii=False, default=str),
                        records_count,
                        expires_at,
                    ],
                )
        except duckdb.Error as exc:
            raise PersistenceError(f"Failed to save snapshot: {exc}", operation="save") from exc

        logger.bind(snapshot_id=snapshot_id, records=records_count).info("Snapshot saved")
        try:
            removed = self.purge_expired()
        except PersistenceError as exc:
            logger.warning(f"Snapshot purge failed: {exc.message}")
        else:
            if removed:
                logger.bind(removed=removed).info("Expired snapshots purged")
        return snapshot_id

    def get_latest(self) -> SnapshotRecord | None:
        rows = self._select("ORDER BY created_at DESC, rowid DESC LIMIT 1")
        return rows[0] if rows else None

    def get_by_id(self, snapshot_id: str) -> SnapshotRecord | None:
        rows = self._select("AND id = ?", [snapshot_id])
        return rows[0] if rows else None

    def list(self, limit: int = 10) -> list[SnapshotRecord]:
        if limit < 1:
            return []
        return self._select(f"ORDER BY created_at DESC, rowid DESC LIMIT {int(limit)}")

    def stats(self) -> SnapshotStats:
        records = self._select("ORDER BY created_at ASC, rowid ASC")
        if not records:
            return SnapshotStats()

        oldest, newest = records[0], records[-1]
        average = round(sum(record.records_count for record in records) / len(records))
        return SnapshotStats(
            total_records=len(records),
            oldest_record=_summary(oldest),
            newest_record=_summary(newest),
            average_records_count=average,
        )

    def purge_expired(self) -> int:
        """Delete expired snapshots, returning how many were removed."""
        try:
            with self._lock:
                result = self.connection.execute(
                    "DELETE FROM snapshots WHERE expires_at IS NOT NULL AND expires_at <= ? RETURNING id",
                    [self._clock()],
                ).fetchall()
        except duckdb.Error as exc:
            raise PersistenceError(f"Failed to purge snapshots: {exc}", operation="purge") from exc
        return len(result)

    def _select(self, clause: str, params: list[Any] | None = None) -> list[SnapshotRecord]:
        query = f"""
            SELECT {_COLUMNS} FROM snapshots
            WHERE data_type = ? AND (expires_at IS NULL OR expires_at > ?)
            {clause}
        """
        try:
            with self._lock:
                rows = self.connection.execute(query, [DATA_TYPE, self._clock(), *(params or [])]).fetchall()
        except duckdb.Error as exc:
            raise PersistenceError(f"Failed to read snapshots: {exc}", operation="read") from exc
        return [_to_record(row) for row in rows]


def _to_record(row: tuple[Any, ...]) -> SnapshotRecord:
    snapshot_id, created_at, data_type, payload, metadata, expires_at = row
    return SnapshotRecord(
        id=snapshot_id,
        created_at=created_at,
        data_type=data_type,
        data=json.loads(payload),
        metadata=json.loads(metadata),
        expires_at=expires_at,
    )


def _summary(record: SnapshotRecord) -> SnapshotSummary:
    return SnapshotSummary(
        id=record.id,
        generated_at=record.metadata.get("generatedAt"),
        records_count=record.records_count,
    )


__all__ = ["DuckDBSnapshotStore", "DATA_TYPE"]
