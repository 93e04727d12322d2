"""
sink.py

Row-oriented persistence contract the ingest jobs depend on:

  insert_one(table, record)                           -> inserted row as dict
  select_many(table, filters, order_by, desc, limit)  -> list of row dicts

``SqlAlchemySink`` backs it with the app's AsyncSession. Any rejected write is
rolled back and surfaced as PersistError so the same session can take the
next insert.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Type

from sqlalchemy import asc, desc, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import Base
from app.models.grid_data import GridData
from app.models.grid_news import GridNews
from app.services.errors import PersistError
from app.utils.logging import get_logger

logger = get_logger(__name__)

GRID_DATA_TABLE = "grid_data"
GRID_NEWS_TABLE = "grid_news"

TABLES: Dict[str, Type[Base]] = {
    GRID_DATA_TABLE: GridData,
    GRID_NEWS_TABLE: GridNews,
}


class Sink(Protocol):
    async def insert_one(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]: ...

    async def select_many(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: str = "created_at",
        descending: bool = True,
        limit: int = 50,
    ) -> List[Dict[str, Any]]: ...


@dataclass
class InsertResult:
    record: Dict[str, Any]
    row: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def row_to_dict(row: Any) -> Dict[str, Any]:
    return {c.key: getattr(row, c.key) for c in inspect(row).mapper.column_attrs}


def _model(table: str) -> Type[Base]:
    model = TABLES.get(table)
    if model is None:
        raise PersistError(f"Unknown table: {table}")
    return model


class SqlAlchemySink:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert_one(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        model = _model(table)
        try:
            row = model(**record)
            self.session.add(row)
            await self.session.commit()
            await self.session.refresh(row)
        except (SQLAlchemyError, TypeError) as e:
            await self.session.rollback()
            logger.error("Insert into %s failed: %s", table, e)
            raise PersistError(f"Insert into {table} failed: {e}") from e
        return row_to_dict(row)

    async def select_many(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: str = "created_at",
        descending: bool = True,
        limit: int = 50,
    ) -> List[Dict[str, Any]]:
        model = _model(table)
        stmt = select(model)
        for key, value in (filters or {}).items():
            stmt = stmt.where(getattr(model, key) == value)
        column = getattr(model, order_by)
        if descending:
            stmt = stmt.order_by(desc(column), desc(model.id))
        else:
            stmt = stmt.order_by(asc(column), asc(model.id))
        stmt = stmt.limit(limit)
        try:
            rows = (await self.session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            raise PersistError(f"Select from {table} failed: {e}") from e
        return [row_to_dict(r) for r in rows]
