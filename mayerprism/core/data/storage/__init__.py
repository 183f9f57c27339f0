"""Snapshot archive."""

from mayerprism.core.data.storage.base import PersistenceStore
from mayerprism.core.data.storage.duckdb_factory import DuckDBFactory, DuckDBFactoryConfig
from mayerprism.core.data.storage.snapshots import DuckDBSnapshotStore

__all__ = ["PersistenceStore", "DuckDBFactory", "DuckDBFactoryConfig", "DuckDBSnapshotStore"]
