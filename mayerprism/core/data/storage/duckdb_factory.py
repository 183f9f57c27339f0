"""Utility helpers for creating DuckDB connections."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import duckdb


@dataclass(frozen=True)
class DuckDBFactoryConfig:
    """Configuration applied to DuckDB connections produced by the factory."""

    database: str | Path = ":memory:"
    read_only: bool = False
    pragmas: Mapping[str, object] = field(default_factory=lambda: {"threads": 1})


class DuckDBFactory:
    """Factory that yields configured DuckDB connections."""

    def __init__(self, config: DuckDBFactoryConfig | None = None) -> None:
        self._config = config or DuckDBFactoryConfig()

    @property
    def database(self) -> str:
        return str(self._config.database)

    def create_connection(self) -> duckdb.DuckDBPyConnection:
        """Create and return a configured DuckDB connection."""

        database = self.database
        if database != ":memory:":
            directory = os.path.dirname(os.path.expanduser(database))
            if directory:
                os.makedirs(directory, exist_ok=True)
            database = os.path.expanduser(database)

        conn = duckdb.connect(database=database, read_only=self._config.read_only)
        self._apply_pragmas(conn)
        return conn

    def _apply_pragmas(self, conn: duckdb.DuckDBPyConnection) -> None:
        for setting, value in self._config.pragmas.items():
            conn.execute(f"SET {setting}={value!r}" if isinstance(value, str) else f"SET {setting}={value}")


__all__ = ["DuckDBFactory", "DuckDBFactoryConfig"]
