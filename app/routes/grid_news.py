from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.deps import get_fetcher, get_sink
from app.services.errors import FetchError
from app.services.fetcher import HtmlFetcher
from app.services.ingest import ingest_news
from app.services.news import NewsItem
from app.services.sink import GRID_NEWS_TABLE, Sink
from app.utils.config import NEWS_SOURCE_URL
from app.utils.logging import get_logger

router = APIRouter(prefix="/grid-news", tags=["grid-news"])
logger = get_logger(__name__)


# ---------- Schemas ----------
class NewsIngestOut(BaseModel):
    success: bool
    message: Optional[str] = None
    items: Optional[List[NewsItem]] = None
    # rows written / rows rejected by the store this run
    persisted: Optional[int] = None
    failed: Optional[int] = None
    error: Optional[str] = None


class GridNewsOut(NewsItem):
    id: int
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


def _envelope(body: NewsIngestOut, code: int = status.HTTP_200_OK) -> JSONResponse:
    content = {k: v for k, v in body.model_dump(mode="json").items() if v is not None}
    return JSONResponse(status_code=code, content=content)


# ---------- Routes ----------
@router.api_route("/fetch", methods=["GET", "POST"], response_model=NewsIngestOut)
async def fetch_grid_news(
    fetch: HtmlFetcher = Depends(get_fetcher),
    sink: Sink = Depends(get_sink),
):
    logger.info("Fetching NERC news from %s", NEWS_SOURCE_URL)
    try:
        report = await ingest_news(fetch, sink, NEWS_SOURCE_URL)
    except FetchError as e:
        return _envelope(NewsIngestOut(success=False, error=str(e)))
    except Exception as e:
        logger.exception("Error fetching NERC news")
        return _envelope(NewsIngestOut(success=False, error=str(e) or "Unknown error"), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return _envelope(
        NewsIngestOut(
            success=True,
            message=f"Fetched {len(report.items)} news items",
            items=report.items,
            persisted=report.persisted,
            failed=report.failed,
        )
    )


@router.options("/fetch", include_in_schema=False)
async def fetch_grid_news_preflight():
    return Response(status_code=status.HTTP_200_OK)


@router.get("", response_model=List[GridNewsOut])
async def list_grid_news(
    limit: int = Query(10, ge=1, le=100),
    type: Optional[str] = Query(None, pattern="^(alert|update|info)$"),
    sink: Sink = Depends(get_sink),
):
    filters = {"type": type} if type else None
    return await sink.select_many(GRID_NEWS_TABLE, filters=filters, limit=limit)
