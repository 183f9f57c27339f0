"""Archive boundary consumed by the pipeline."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from mayerprism.core.models import SnapshotRecord, SnapshotStats


@runtime_checkable
class PersistenceStore(Protocol):
    """Durable history of pipeline snapshots.

    The pipeline only calls :meth:`save`; the read methods and
    :meth:`purge_expired` serve the command line, which :meth:`close`s the
    store after each command.
    """

    def save(self, payload: list[dict[str, Any]], metadata: dict[str, Any]) -> str: ...

    def get_latest(self) -> SnapshotRecord | None: ...

    def get_by_id(self, snapshot_id: str) -> SnapshotRecord | None: ...

    def list(self, limit: int = 10) -> list[SnapshotRecord]: ...

    def stats(self) -> SnapshotStats: ...

    def purge_expired(self) -> int: ...

    def close(self) -> None: ...
