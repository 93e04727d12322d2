"""create grid_data and grid_news

Revision ID: 5c1e2f9a7b30
Revises:
Create Date: 2026-01-09 08:12:44.301552
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5c1e2f9a7b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "grid_data",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("generation_mw", sa.Float(), nullable=True),
        sa.Column("frequency", sa.Float(), nullable=True),
        sa.Column("load_percent", sa.Float(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("source", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_grid_data_id", "grid_data", ["id"])
    op.create_index("ix_grid_data_created_at", "grid_data", ["created_at"])

    op.create_table(
        "grid_news",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("region", sa.String(length=64), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
    )
    op.create_index("ix_grid_news_id", "grid_news", ["id"])
    op.create_index("ix_grid_news_created_at", "grid_news", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_grid_news_created_at", table_name="grid_news")
    op.drop_index("ix_grid_news_id", table_name="grid_news")
    op.drop_table("grid_news")
    op.drop_index("ix_grid_data_created_at", table_name="grid_data")
    op.drop_index("ix_grid_data_id", table_name="grid_data")
    op.drop_table("grid_data")
