import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.deps import get_fetcher, get_sink
from app.main import app
from app.services.errors import PersistError


class FakeSink:
    """In-memory stand-in for the datastore. Rejects configured tables or titles."""

    def __init__(self, fail_tables=(), fail_titles=()):
        self.rows = {}
        self.fail_tables = set(fail_tables)
        self.fail_titles = set(fail_titles)

    async def insert_one(self, table, record):
        if table in self.fail_tables or record.get("title") in self.fail_titles:
            raise PersistError(f"Insert into {table} failed: rejected")
        rows = self.rows.setdefault(table, [])
        row = {"id": len(rows) + 1, **record, "created_at": datetime(2026, 1, 8, 6, 0, tzinfo=timezone.utc)}
        rows.append(row)
        return row

    async def select_many(self, table, filters=None, order_by="created_at", descending=True, limit=50):
        rows = [
            r for r in self.rows.get(table, [])
            if all(r.get(k) == v for k, v in (filters or {}).items())
        ]
        rows.sort(key=lambda r: r["id"], reverse=descending)
        return rows[:limit]


@pytest.fixture
def fake_sink():
    return FakeSink()


@pytest.fixture
def make_client(fake_sink):
    """
    Build a TestClient whose fetcher returns ``html`` (or raises ``error``)
    and whose sink is ``sink`` (defaults to the shared fake_sink).
    """
    def _make(html="", error=None, sink=None):
        async def fake_fetch(url):
            if error is not None:
                raise error
            return html

        app.dependency_overrides[get_fetcher] = lambda: fake_fetch
        app.dependency_overrides[get_sink] = lambda: sink if sink is not None else fake_sink
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def grid_card_html():
    return (
        "<div class='card'><h4>Grid @ 06:00 Hrs for 08/01/2026</h4>"
        "<p>Generation: 4,876.45MW Frequency: 50.18Hz | 2.45 % (119.30)</p></div>"
    )


@pytest.fixture
def news_html():
    return """
    <main>
      <article class="post">
        <h2 class="entry-title"><a href="/a">Urgent Update Notice on Grid Maintenance</a></h2>
        <span class="date">January 8, 2025</span>
      </article>
      <article class="post">
        <h2 class="entry-title"><a href="/b">Commission   announces new
            tariff review</a></h2>
        <time>2025-01-06</time>
      </article>
      <article class="post">
        <h3 class="entry-title"><a href="/c">Quarterly report on market performance</a></h3>
        <span>13/45/2025</span>
      </article>
    </main>
    """


@pytest.fixture
def failing_sink():
    """Factory for a FakeSink that rejects the given tables or titles."""
    def _make(fail_tables=(), fail_titles=()):
        return FakeSink(fail_tables=fail_tables, fail_titles=fail_titles)

    return _make
