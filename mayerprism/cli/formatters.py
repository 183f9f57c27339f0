"""Output formatters for CLI commands."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Mapping, Sequence, TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table
from rich.text import Text

from mayerprism.core.services.analysis import OVERVALUED_ABOVE, UNDERVALUED_BELOW

NUMERIC_COLUMNS = frozenset(
    {
        "open",
        "close",
        "movingAverage200",
        "mayerMultiple",
        "sentimentValue",
        "price",
        "recordsCount",
        "processingTimeMs",
        "totalRecords",
        "averageRecordsCount",
    }
)


class OutputFormatter:
    """Base class for CLI output formatters."""

    name: str

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        raise NotImplementedError


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """Rich table; Mayer Multiple cells are colored by valuation band."""

    name: str = "table"
    no_color: bool = False

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        console = Console(file=stream, color_system=None if self.no_color else "auto", no_color=self.no_color)
        if not rows:
            console.print("No data available.")
            return

        resolved = list(columns) if columns else list(rows[0].keys())
        table = Table(box=SIMPLE, header_style="" if self.no_color else "bold")
        for column in resolved:
            table.add_column(column, justify="right" if column in NUMERIC_COLUMNS else "left")
        for row in rows:
            table.add_row(*(self._cell(column, row.get(column)) for column in resolved))
        console.print(table)

    def _cell(self, column: str, value: object) -> Text | str:
        if value is None:
            return "-"
        if isinstance(value, float):
            text = f"{value:,.3f}" if column != "processingTimeMs" else f"{value:,.0f}"
        else:
            text = str(value)
        if column == "mayerMultiple" and isinstance(value, float) and not self.no_color:
            return Text(text, style=_mayer_style(value))
        return text


def _mayer_style(value: float) -> str:
    if value < UNDERVALUED_BELOW:
        return "green"
    if value > OVERVALUED_ABOVE:
        return "red"
    return ""


@dataclass(slots=True)
class JSONLFormatter(OutputFormatter):
    """One JSON object per line, restricted to ``columns`` when given."""

    name: str = "jsonl"

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        for row in rows:
            selected = {column: row.get(column) for column in columns} if columns else dict(row)
            stream.write(json.dumps(selected, ensure_ascii=False, default=str))
            stream.write("\n")
        stream.flush()


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    """Instantiate a formatter by name."""

    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "jsonl":
        return JSONLFormatter()
    msg = f"Unsupported format '{name}'. Available formats: table, jsonl."
    raise ValueError(msg)


__all__ = ["OutputFormatter", "TableFormatter", "JSONLFormatter", "create_formatter"]
