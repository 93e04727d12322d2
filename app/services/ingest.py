from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from app.services import grid_metrics, news
from app.services.errors import PersistError
from app.services.fetcher import HtmlFetcher
from app.services.grid_metrics import GridMetricSample, GridStatus
from app.services.news import MAX_PERSISTED, NewsItem
from app.services.sink import GRID_DATA_TABLE, GRID_NEWS_TABLE, InsertResult, Sink
from app.utils.logging import get_logger

logger = get_logger(__name__)


async def ingest_grid_metrics(
    fetch: HtmlFetcher,
    sink: Sink,
    url: str,
    unknown_status: GridStatus = GridStatus.STABLE,
) -> GridMetricSample:
    """
    One run: fetch, extract, insert exactly one grid_data row.
    FetchError and PersistError propagate; extraction misses never do.
    """
    html = await fetch(url)
    sample = grid_metrics.extract_grid_metrics(html, unknown_status=unknown_status)
    logger.info(
        "Parsed grid data: generation=%s frequency=%s trend=%s status=%s",
        sample.generation_mw, sample.frequency_hz, sample.load_trend_percent, sample.status.value,
    )

    row = await sink.insert_one(GRID_DATA_TABLE, grid_metrics.to_row(sample))
    stored = grid_metrics.from_row(row)
    logger.info("Stored grid data row id=%s", row.get("id"))
    return stored


@dataclass
class NewsIngestReport:
    items: List[NewsItem] = field(default_factory=list)
    results: List[InsertResult] = field(default_factory=list)

    @property
    def persisted(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)


async def persist_news(sink: Sink, items: List[NewsItem]) -> List[InsertResult]:
    """Insert each item on its own; a rejected row does not stop the rest."""
    results: List[InsertResult] = []
    for item in items:
        record = news.to_row(item)
        try:
            row = await sink.insert_one(GRID_NEWS_TABLE, record)
            results.append(InsertResult(record=record, row=row))
        except PersistError as e:
            logger.error("Error inserting news item %r: %s", item.title, e)
            results.append(InsertResult(record=record, error=str(e)))
    return results


async def ingest_news(fetch: HtmlFetcher, sink: Sink, url: str) -> NewsIngestReport:
    """One run: fetch, extract, insert up to five grid_news rows. Only FetchError propagates."""
    html = await fetch(url)
    items = news.extract_news(html)[:MAX_PERSISTED]
    logger.info("Found %d news items", len(items))

    report = NewsIngestReport(items=items, results=await persist_news(sink, items))
    if report.failed:
        logger.warning("Persisted %d of %d news items", report.persisted, len(items))
    return report
