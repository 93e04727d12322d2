"""
deps.py

FastAPI dependencies for the ingest routes. Tests swap these out through
``app.dependency_overrides`` to run the pipelines against canned HTML and an
in-memory sink.
"""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.services.fetcher import HtmlFetcher, fetch_html
from app.services.grid_metrics import GridStatus
from app.services.sink import Sink, SqlAlchemySink
from app.utils.config import GRID_UNKNOWN_FREQUENCY_STATUS
from app.utils.logging import get_logger

logger = get_logger(__name__)


async def get_sink(db: AsyncSession = Depends(get_db)) -> Sink:
    return SqlAlchemySink(db)


def get_fetcher() -> HtmlFetcher:
    return fetch_html


def get_unknown_status() -> GridStatus:
    try:
        return GridStatus(GRID_UNKNOWN_FREQUENCY_STATUS)
    except ValueError:
        logger.warning(
            "GRID_UNKNOWN_FREQUENCY_STATUS=%r is not a grid status; using %s",
            GRID_UNKNOWN_FREQUENCY_STATUS,
            GridStatus.STABLE.value,
        )
        return GridStatus.STABLE
