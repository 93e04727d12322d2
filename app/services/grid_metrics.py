"""
grid_metrics.py

Turns the raw power.gov.ng homepage into a GridMetricSample.

The page is hand-edited and its markup drifts, so generation and frequency are
recovered through an ordered list of regex strategies. Each strategy is a pure
function ``text -> ExtractedFields``; the cascade fills every field from the
first strategy that yields it and stops once both are present.

Card text looks like:
  "Grid @ 06:00 Hrs for 08/01/2026 Generation: 4,876.45MW Frequency: 50.18Hz | 2.45 % (119.30)"
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Tuple

from pydantic import BaseModel

from app.services.errors import ParseError
from app.utils.logging import get_logger

logger = get_logger(__name__)

SOURCE_TAG = "power.gov.ng"

# Plausible national generation band (MW), exclusive on both ends
GENERATION_BAND_MW: Tuple[float, float] = (2000.0, 10000.0)


class GridStatus(str, Enum):
    STABLE = "stable"
    STRESSED = "stressed"
    CRITICAL = "critical"
    UNKNOWN = "unknown"


class GridMetricSample(BaseModel):
    generation_mw: Optional[float] = None
    frequency_hz: Optional[float] = None
    load_trend_percent: Optional[float] = None
    status: GridStatus = GridStatus.STABLE
    source: str = SOURCE_TAG
    observed_at: Optional[datetime] = None


@dataclass
class ExtractedFields:
    generation_mw: Optional[float] = None
    frequency_hz: Optional[float] = None

    @property
    def complete(self) -> bool:
        return self.generation_mw is not None and self.frequency_hz is not None


# ---------- Numbers ----------
def parse_number(token: str) -> float:
    """'4,876.45' -> 4876.45. Grouping commas are dropped before conversion."""
    cleaned = (token or "").replace(",", "").strip()
    try:
        return float(cleaned)
    except ValueError as e:
        raise ParseError(f"not a number: {token!r}") from e


def _num(token: Optional[str]) -> Optional[float]:
    if token is None:
        return None
    try:
        return parse_number(token)
    except ParseError:
        logger.debug("Discarding unparseable token %r", token)
        return None


# ---------- Strategies ----------
# one match attempt per digit run: the lookbehind refuses to start inside a run
_NUM = r"(?<![\d,])(\d[\d,]*(?:\.\d+)?)"
_DEC = r"(?<![\d.])(\d+(?:\.\d+)?)"

GRID_CARD_RX = re.compile(
    r"Grid\s*@[\s\S]*?Generation:?\s*" + _NUM + r"\s*MW[\s\S]*?Frequency:?\s*" + _DEC + r"\s*Hz",
    re.I,
)
# label, colon, then one or more tags (</span>, <strong>, ...) before the value
TAG_DELIMITED_RX = re.compile(
    r"Generation\s*:\s*(?:<[^>]*>\s*)+" + _NUM + r"\s*MW[\s\S]*?"
    r"Frequency\s*:\s*(?:<[^>]*>\s*)+" + _DEC + r"\s*Hz",
    re.I,
)
GENERATION_RX = re.compile(r"Generation[:\s]*" + _NUM + r"\s*MW", re.I)
FREQUENCY_RX = re.compile(r"Frequency[:\s]*" + _DEC + r"\s*Hz", re.I)
ANY_MW_RX = re.compile(_NUM + r"\s*MW", re.I)
ANY_HZ_RX = re.compile(r"(?<![\d.])(\d+\.\d+)\s*Hz", re.I)
TREND_RX = re.compile(r"\|\s*([\-\+]?\d+(?:\.\d+)?)\s*%")


def match_grid_card(text: str) -> ExtractedFields:
    m = GRID_CARD_RX.search(text)
    if not m:
        return ExtractedFields()
    return ExtractedFields(_num(m.group(1)), _num(m.group(2)))


def match_tag_delimited(text: str) -> ExtractedFields:
    m = TAG_DELIMITED_RX.search(text)
    if not m:
        return ExtractedFields()
    return ExtractedFields(_num(m.group(1)), _num(m.group(2)))


def match_single_fields(text: str) -> ExtractedFields:
    gen = GENERATION_RX.search(text)
    freq = FREQUENCY_RX.search(text)
    return ExtractedFields(
        _num(gen.group(1)) if gen else None,
        _num(freq.group(1)) if freq else None,
    )


def match_numeric_ranges(text: str) -> ExtractedFields:
    """Last resort: first MW figure inside the generation band, first decimal Hz figure."""
    lo, hi = GENERATION_BAND_MW
    generation: Optional[float] = None
    for m in ANY_MW_RX.finditer(text):
        value = _num(m.group(1))
        if value is not None and lo < value < hi:
            generation = value
            break

    hz = ANY_HZ_RX.search(text)
    return ExtractedFields(generation, _num(hz.group(1)) if hz else None)


STRATEGIES: List[Tuple[str, Callable[[str], ExtractedFields]]] = [
    ("grid_card", match_grid_card),
    ("tag_delimited", match_tag_delimited),
    ("single_field", match_single_fields),
    ("numeric_range", match_numeric_ranges),
]


def run_strategies(
    text: str,
    strategies: Optional[List[Tuple[str, Callable[[str], ExtractedFields]]]] = None,
) -> ExtractedFields:
    out = ExtractedFields()
    for name, strategy in strategies or STRATEGIES:
        found = strategy(text)
        if out.generation_mw is None and found.generation_mw is not None:
            out.generation_mw = found.generation_mw
            logger.info("Generation %.2f MW via %s", out.generation_mw, name)
        if out.frequency_hz is None and found.frequency_hz is not None:
            out.frequency_hz = found.frequency_hz
            logger.info("Frequency %.2f Hz via %s", out.frequency_hz, name)
        if out.complete:
            break
    return out


def extract_trend_percent(text: str) -> Optional[float]:
    m = TREND_RX.search(text)
    return _num(m.group(1)) if m else None


# ---------- Classification ----------
def classify_status(frequency_hz: Optional[float], fallback: GridStatus = GridStatus.STABLE) -> GridStatus:
    """
    Nominal 50 Hz grid:
      [49.5, 50.5]                 -> stable
      [49.0, 49.5) or (50.5, 51.0] -> stressed
      anything else                -> critical
    No reading returns ``fallback``.
    """
    if frequency_hz is None:
        return fallback
    if 49.5 <= frequency_hz <= 50.5:
        return GridStatus.STABLE
    if 49.0 <= frequency_hz <= 51.0:
        return GridStatus.STRESSED
    return GridStatus.CRITICAL


def extract_grid_metrics(html: str, unknown_status: GridStatus = GridStatus.STABLE) -> GridMetricSample:
    """Never raises: anything not found comes back as None."""
    text = html or ""
    fields = run_strategies(text)
    trend = extract_trend_percent(text)
    status = classify_status(fields.frequency_hz, fallback=unknown_status)

    if fields.frequency_hz is None:
        logger.warning("No frequency found; status defaults to %s", status.value)

    return GridMetricSample(
        generation_mw=fields.generation_mw,
        frequency_hz=fields.frequency_hz,
        load_trend_percent=trend,
        status=status,
    )


def to_row(sample: GridMetricSample) -> dict:
    """Column names of the grid_data table."""
    return {
        "generation_mw": sample.generation_mw,
        "frequency": sample.frequency_hz,
        "load_percent": sample.load_trend_percent,
        "status": sample.status.value,
        "source": sample.source,
    }


def _status_from_row(value: Optional[str]) -> GridStatus:
    # the table is shared with older writers; statuses we don't know read as unknown
    try:
        return GridStatus(value or GridStatus.STABLE.value)
    except ValueError:
        logger.warning("Unrecognised grid status %r in grid_data row", value)
        return GridStatus.UNKNOWN


def from_row(row: dict) -> GridMetricSample:
    return GridMetricSample(
        generation_mw=row.get("generation_mw"),
        frequency_hz=row.get("frequency"),
        load_trend_percent=row.get("load_percent"),
        status=_status_from_row(row.get("status")),
        source=row.get("source") or SOURCE_TAG,
        observed_at=row.get("created_at"),
    )
