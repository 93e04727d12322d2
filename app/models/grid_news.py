from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from app.db import Base

class GridNews(Base):
    __tablename__ = "grid_news"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # 'alert' | 'update' | 'info'
    type = Column(String(16), nullable=False, default="info")

    # no region signal on the NERC page yet; kept for the dashboard filter
    region = Column(String(64), nullable=True)

    published_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
