from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.deps import get_fetcher, get_sink, get_unknown_status
from app.services import grid_metrics
from app.services.errors import FetchError, PersistError
from app.services.fetcher import HtmlFetcher
from app.services.grid_metrics import GridMetricSample, GridStatus
from app.services.ingest import ingest_grid_metrics
from app.services.sink import GRID_DATA_TABLE, Sink
from app.utils.config import GRID_SOURCE_URL
from app.utils.logging import get_logger

router = APIRouter(prefix="/grid-data", tags=["grid-data"])
logger = get_logger(__name__)


# ---------- Schemas ----------
class GridIngestOut(BaseModel):
    success: bool
    data: Optional[GridMetricSample] = None
    message: Optional[str] = None
    error: Optional[str] = None


def _envelope(body: GridIngestOut, code: int = status.HTTP_200_OK) -> JSONResponse:
    content = {k: v for k, v in body.model_dump(mode="json").items() if v is not None}
    return JSONResponse(status_code=code, content=content)


# ---------- Routes ----------
@router.api_route("/fetch", methods=["GET", "POST"], response_model=GridIngestOut)
async def fetch_grid_data(
    fetch: HtmlFetcher = Depends(get_fetcher),
    sink: Sink = Depends(get_sink),
    unknown_status: GridStatus = Depends(get_unknown_status),
):
    logger.info("Fetching grid data from %s", GRID_SOURCE_URL)
    try:
        sample = await ingest_grid_metrics(fetch, sink, GRID_SOURCE_URL, unknown_status=unknown_status)
    except FetchError as e:
        return _envelope(GridIngestOut(success=False, error=str(e)))
    except PersistError as e:
        return _envelope(GridIngestOut(success=False, error=str(e)), status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception as e:
        logger.exception("Error fetching grid data")
        return _envelope(GridIngestOut(success=False, error=str(e) or "Unknown error"), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return _envelope(
        GridIngestOut(success=True, data=sample, message="Grid data fetched and stored successfully")
    )


@router.options("/fetch", include_in_schema=False)
async def fetch_grid_data_preflight():
    return Response(status_code=status.HTTP_200_OK)


@router.get("", response_model=List[GridMetricSample])
async def list_grid_data(
    limit: int = Query(50, ge=1, le=500),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    sink: Sink = Depends(get_sink),
):
    rows = await sink.select_many(GRID_DATA_TABLE, descending=(order == "desc"), limit=limit)
    return [grid_metrics.from_row(r) for r in rows]
