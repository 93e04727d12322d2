from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum
from itertools import islice
from typing import Iterable, List, Optional, Set, Tuple

from dateutil import parser as dateparser
from pydantic import BaseModel

from app.services.errors import ParseError
from app.utils.logging import get_logger

logger = get_logger(__name__)

MAX_CANDIDATES = 10      # per tier scan
MAX_PERSISTED = 5
TITLE_MAX_LEN = 200
TITLE_MIN_LEN = 10       # titles this short or shorter are menu noise
DESCRIPTION_TITLE_LEN = 100

PLACEHOLDER_TITLE = "NERC Updates Available"
PLACEHOLDER_DESCRIPTION = "Check nerc.gov.ng for the latest regulatory updates and announcements."


class NewsType(str, Enum):
    ALERT = "alert"
    UPDATE = "update"
    INFO = "info"


class NewsItem(BaseModel):
    title: str
    description: str
    type: NewsType = NewsType.INFO
    region: Optional[str] = None
    published_at: Optional[datetime] = None


# ---------- Patterns ----------
_MONTHS = r"(?:January|February|March|April|May|June|July|August|September|October|November|December)"

ARTICLE_RX = re.compile(r"<article[^>]*>[\s\S]*?</article>", re.I)
ENTRY_TITLE_RX = re.compile(
    r'<h[2-4][^>]*class="[^"]*entry-title[^"]*"[^>]*>[\s\S]*?<a[^>]*>([^<]+)</a>', re.I
)
LOOSE_ANCHOR_RX = re.compile(r"<a[^>]*>([^<]{20,100})</a>", re.I)
HEADING_TITLE_RX = re.compile(
    r'<h[2-4][^>]*class="[^"]*(?:entry-title|post-title|title)[^"]*"[^>]*>[\s\S]*?'
    r'<a[^>]*href="[^"]*"[^>]*>([^<]+)</a>',
    re.I,
)

# priority order: "January 8, 2025", "8 January 2025", "08/01/2025", "2025-01-08"
DATE_PATTERNS: List[re.Pattern] = [
    re.compile(_MONTHS + r"\s+\d{1,2},?\s+\d{4}", re.I),
    re.compile(r"\d{1,2}\s+" + _MONTHS + r"\s+\d{4}", re.I),
    re.compile(r"\d{1,2}/\d{1,2}/\d{4}"),
    re.compile(r"\d{4}-\d{2}-\d{2}"),
]

ALERT_KEYWORDS = ("warning", "urgent", "notice")
UPDATE_KEYWORDS = ("update", "new", "announce")


# ---------- Normalization / classification ----------
def normalize_title(raw: str) -> str:
    return re.sub(r"\s+", " ", raw or "").strip()


def classify_title(title: str) -> NewsType:
    lower = title.lower()
    if any(k in lower for k in ALERT_KEYWORDS):
        return NewsType.ALERT
    if any(k in lower for k in UPDATE_KEYWORDS):
        return NewsType.UPDATE
    return NewsType.INFO


def describe(title: str) -> str:
    return f"Latest update from NERC regarding {title[:DESCRIPTION_TITLE_LEN]}..."


def parse_date(text: str) -> datetime:
    """Month-first for slash dates. Naive results are taken as UTC."""
    try:
        parsed = dateparser.parse(text, dayfirst=False)
    except (ValueError, OverflowError) as e:
        raise ParseError(f"bad date: {text!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def find_date(block: str) -> Optional[str]:
    for rx in DATE_PATTERNS:
        m = rx.search(block)
        if m:
            return m.group(0)
    return None


def parse_published_at(block: str) -> Optional[datetime]:
    raw = find_date(block)
    if raw is None:
        return None
    try:
        return parse_date(raw)
    except ParseError:
        logger.info("Could not parse date: %s", raw)
        return None


# ---------- Candidate scans ----------
def scan_article_blocks(html: str) -> List[Tuple[str, Optional[datetime]]]:
    """(raw title, published_at) from the first ten <article> blocks."""
    out: List[Tuple[str, Optional[datetime]]] = []
    for m in islice(ARTICLE_RX.finditer(html), MAX_CANDIDATES):
        block = m.group(0)
        title = ENTRY_TITLE_RX.search(block) or LOOSE_ANCHOR_RX.search(block)
        if not title:
            continue
        out.append((title.group(1), parse_published_at(block)))
    return out


def scan_heading_anchors(html: str) -> List[Tuple[str, Optional[datetime]]]:
    """Pages without <article> wrappers: heading anchors anywhere, no dates."""
    return [(m.group(1), None) for m in islice(HEADING_TITLE_RX.finditer(html), MAX_CANDIDATES)]


def build_items(candidates: Iterable[Tuple[str, Optional[datetime]]]) -> List[NewsItem]:
    """Normalize, drop short titles and duplicates (first one in document order wins)."""
    # keyed on the stored (truncated) title so persisted titles stay distinct
    seen: Set[str] = set()
    items: List[NewsItem] = []
    for raw, published_at in candidates:
        title = normalize_title(raw)
        stored = title[:TITLE_MAX_LEN]
        if len(title) <= TITLE_MIN_LEN or stored in seen:
            continue
        seen.add(stored)
        items.append(
            NewsItem(
                title=stored,
                description=describe(title),
                type=classify_title(title),
                region=None,
                published_at=published_at,
            )
        )
    return items


def placeholder_item() -> NewsItem:
    return NewsItem(
        title=PLACEHOLDER_TITLE,
        description=PLACEHOLDER_DESCRIPTION,
        type=NewsType.INFO,
    )


def extract_news(html: str) -> List[NewsItem]:
    """
    Article blocks first, heading anchors if that found nothing, and a single
    placeholder if both came up empty. Never returns an empty list.
    """
    text = html or ""
    items = build_items(scan_article_blocks(text))
    if not items:
        items = build_items(scan_heading_anchors(text))
        if items:
            logger.info("No <article> items; recovered %d from heading anchors", len(items))
    if not items:
        logger.info("No news items found in HTML, adding placeholder")
        items = [placeholder_item()]
    return items


def to_row(item: NewsItem) -> dict:
    return {
        "title": item.title,
        "description": item.description,
        "type": item.type.value,
        "region": item.region,
        "published_at": item.published_at,
    }
