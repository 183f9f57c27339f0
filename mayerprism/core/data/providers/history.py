"""Price history extraction from a rendered quote page."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime, time

from bs4 import BeautifulSoup, Tag
from loguru import logger

from mayerprism.core.config import SourceConfig
from mayerprism.core.exceptions import ExtractionError
from mayerprism.core.models import PriceRecord

from .renderer import PageRenderer, create_renderer

MIN_CELLS = 5
DATE_CELL, OPEN_CELL, CLOSE_CELL = 0, 1, 4


def build_history_url(config: SourceConfig, now: datetime | None = None) -> str:
    """Fill the configured URL template with symbol and epoch period bounds."""
    start = datetime.combine(date.fromisoformat(config.history_start), time.min, tzinfo=UTC)
    end = now or datetime.now(UTC)
    return config.url_template.format(
        symbol=config.symbol,
        period1=int(start.timestamp()),
        period2=int(end.timestamp()),
    )


def parse_price_table(html: str, selector: str) -> list[PriceRecord]:
    """Read ``(date, open, close)`` from every usable body row of the table.

    A row is used when it has at least five cells and the first, second and
    fifth cells have text. Dividend and split rows, which span fewer cells,
    are skipped that way.
    """
    table = BeautifulSoup(html, "html.parser").select_one(selector)
    if table is None:
        raise ExtractionError("Price table not found in document", stage="extract", details={"selector": selector})

    records: list[PriceRecord] = []
    for row in table.select("tbody tr"):
        cells = row.find_all("td")
        if len(cells) < MIN_CELLS:
            continue
        day, open_, close = (_cell_text(cells[i]) for i in (DATE_CELL, OPEN_CELL, CLOSE_CELL))
        if day and open_ and close:
            records.append(PriceRecord(date=day, open=open_, close=close))
    return records


def _cell_text(cell: Tag) -> str:
    return cell.get_text(strip=True)


class DocumentExtractor:
    """Render the history page and extract its price rows."""

    def __init__(
        self,
        url: str,
        renderer_factory: Callable[[], PageRenderer],
        table_selector: str,
        navigation_timeout: float = 60.0,
        selector_timeout: float = 10.0,
    ):
        self.url = url
        self.renderer_factory = renderer_factory
        self.table_selector = table_selector
        self.navigation_timeout = navigation_timeout
        self.selector_timeout = selector_timeout

    @classmethod
    def from_config(cls, config: SourceConfig) -> DocumentExtractor:
        options = {}
        if config.renderer == "playwright":
            options = {
                "headless": config.headless,
                "executable_path": config.executable_path,
                "block_resources": config.block_resources,
            }
        return cls(
            url=build_history_url(config),
            renderer_factory=lambda: create_renderer(config.renderer, **options),
            table_selector=config.table_selector,
            navigation_timeout=config.navigation_timeout,
            selector_timeout=config.selector_timeout,
        )

    async def extract(self) -> list[PriceRecord]:
        """Return the table rows; the renderer is closed before this returns or raises."""
        log = logger.bind(url=self.url)
        log.info("Acquiring renderer")
        try:
            html = await self._render()
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(f"Renderer failed: {exc}", stage="acquire_renderer", url=self.url) from exc

        records = parse_price_table(html, self.table_selector)
        if not records:
            raise ExtractionError("Price table contains no parseable rows", stage="extract", url=self.url)
        log.bind(rows=len(records)).info("Extracted price rows")
        return records

    async def _render(self) -> str:
        async with self.renderer_factory() as renderer:
            try:
                document = await renderer.open(self.url, timeout=self.navigation_timeout)
            except TimeoutError as exc:
                raise ExtractionError(str(exc), stage="navigate", url=self.url) from exc
            except Exception as exc:
                raise ExtractionError(f"Navigation failed: {exc}", stage="navigate", url=self.url) from exc

            try:
                await document.wait_for_selector(self.table_selector, timeout=self.selector_timeout)
            except TimeoutError as exc:
                raise ExtractionError(
                    str(exc), stage="wait_for_table", url=self.url, details={"selector": self.table_selector}
                ) from exc
            except Exception as exc:
                raise ExtractionError(f"Waiting for table failed: {exc}", stage="wait_for_table", url=self.url) from exc

            try:
                return await document.content()
            except Exception as exc:
                raise ExtractionError(f"Reading document failed: {exc}", stage="extract", url=self.url) from exc


__all__ = ["DocumentExtractor", "build_history_url", "parse_price_table"]
