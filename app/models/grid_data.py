from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base


class GridData(Base):
    """One scraped grid snapshot. Rows are appended, never updated."""

    __tablename__ = "grid_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    generation_mw: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    frequency: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    # trend annotation from the grid card ("| 2.45 %"), not a capacity figure
    load_percent: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default="stable")
    source: Mapped[str] = mapped_column(String(128), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
