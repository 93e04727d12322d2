import time

import pytest

from app.services.errors import ParseError
from app.services.grid_metrics import (
    ExtractedFields,
    GridStatus,
    classify_status,
    extract_grid_metrics,
    extract_trend_percent,
    from_row,
    match_grid_card,
    match_numeric_ranges,
    match_single_fields,
    match_tag_delimited,
    parse_number,
    run_strategies,
    to_row,
)


# ============================================================
# NUMBERS
# ============================================================

def test_parse_number_ignores_grouping_commas():
    assert parse_number("4,876.45") == parse_number("4876.45") == 4876.45
    assert parse_number("12,000") == 12000.0


def test_parse_number_rejects_tokens_without_digits():
    with pytest.raises(ParseError):
        parse_number(",")


# ============================================================
# STATUS CLASSIFICATION
# ============================================================

@pytest.mark.parametrize("freq, expected", [
    (50.0, GridStatus.STABLE),
    (49.5, GridStatus.STABLE),
    (50.5, GridStatus.STABLE),
    (49.49, GridStatus.STRESSED),
    (49.0, GridStatus.STRESSED),
    (50.51, GridStatus.STRESSED),
    (51.0, GridStatus.STRESSED),
    (48.99, GridStatus.CRITICAL),
    (51.01, GridStatus.CRITICAL),
    (0.0, GridStatus.CRITICAL),
])
def test_classify_status_bands(freq, expected):
    assert classify_status(freq) == expected


def test_classify_status_without_frequency_uses_fallback():
    assert classify_status(None) == GridStatus.STABLE
    assert classify_status(None, fallback=GridStatus.UNKNOWN) == GridStatus.UNKNOWN


# ============================================================
# STRATEGIES
# ============================================================

def test_grid_card_strategy(grid_card_html):
    fields = match_grid_card(grid_card_html)
    assert fields.generation_mw == 4876.45
    assert fields.frequency_hz == 50.18


def test_grid_card_strategy_needs_the_card_header():
    assert match_grid_card("Generation: 4,876.45MW Frequency: 50.18Hz") == ExtractedFields()


def test_tag_delimited_strategy():
    html = (
        "<li><span>Generation:</span> 3,912.10 MW</li>"
        "<li><span>Frequency:</span><strong> 49.82 Hz</strong></li>"
    )
    fields = match_tag_delimited(html)
    assert fields.generation_mw == 3912.10
    assert fields.frequency_hz == 49.82


def test_single_field_strategy_recovers_fields_independently():
    fields = match_single_fields("<p>Generation 4100 MW</p><p>no frequency today</p>")
    assert fields.generation_mw == 4100.0
    assert fields.frequency_hz is None


def test_numeric_range_strategy_skips_out_of_band_values():
    html = "Unit 3: 450 MW. Peak 12,500 MW. National 4,321.9 MW at 49.91 Hz"
    fields = match_numeric_ranges(html)
    assert fields.generation_mw == 4321.9
    assert fields.frequency_hz == 49.91


def test_numeric_range_strategy_requires_decimal_hz():
    assert match_numeric_ranges("50 Hz").frequency_hz is None


def test_cascade_fills_fields_from_different_strategies():
    html = "<p>Generation: 4,050 MW</p><footer>measured at 50.02 Hz</footer>"
    fields = run_strategies(html)
    assert fields.generation_mw == 4050.0      # single_field
    assert fields.frequency_hz == 50.02        # numeric_range


def test_cascade_stops_once_both_fields_are_found():
    calls = []

    def first(text):
        calls.append("first")
        return ExtractedFields(1.0, 50.0)

    def second(text):
        calls.append("second")
        return ExtractedFields(2.0, 49.0)

    fields = run_strategies("", [("first", first), ("second", second)])
    assert (fields.generation_mw, fields.frequency_hz) == (1.0, 50.0)
    assert calls == ["first"]


def test_cascade_keeps_zero_generation():
    fields = run_strategies("Grid @ 01:00 Hrs Generation: 0MW Frequency: 0.00Hz")
    assert fields.generation_mw == 0.0
    assert fields.frequency_hz == 0.0


@pytest.mark.parametrize("html, expected", [
    ("| 2.45 % (119.30)", 2.45),
    ("|-1.30%", -1.30),
    ("| +0.5 %", 0.5),
    ("no trend here 45%", None),
])
def test_trend_percent(html, expected):
    assert extract_trend_percent(html) == expected


# ============================================================
# END TO END
# ============================================================

def test_extract_grid_card_scenario(grid_card_html):
    sample = extract_grid_metrics(grid_card_html)
    assert sample.generation_mw == 4876.45
    assert sample.frequency_hz == 50.18
    assert sample.load_trend_percent == 2.45
    assert sample.status == GridStatus.STABLE
    assert sample.source == "power.gov.ng"


def test_extract_from_unrecognisable_page():
    sample = extract_grid_metrics("<html><body><h1>Ministry of Power</h1></body></html>")
    assert sample.generation_mw is None
    assert sample.frequency_hz is None
    assert sample.load_trend_percent is None
    assert sample.status == GridStatus.STABLE


def test_extract_with_unknown_fallback_configured():
    sample = extract_grid_metrics("", unknown_status=GridStatus.UNKNOWN)
    assert sample.status == GridStatus.UNKNOWN


def test_extract_critical_frequency():
    sample = extract_grid_metrics("Grid @ 14:00 Hrs Generation: 2,100MW Frequency: 48.70Hz")
    assert sample.status == GridStatus.CRITICAL


def test_to_row_uses_table_columns(grid_card_html):
    row = to_row(extract_grid_metrics(grid_card_html))
    assert row == {
        "generation_mw": 4876.45,
        "frequency": 50.18,
        "load_percent": 2.45,
        "status": "stable",
        "source": "power.gov.ng",
    }


def test_tag_delimited_strategy_needs_markup_between_label_and_value():
    assert match_tag_delimited("Generation: 3,912.10 MW Frequency: 49.82 Hz") == ExtractedFields()


# ============================================================
# HOSTILE INPUT
# ============================================================

@pytest.mark.parametrize("html", [
    "<p>" + "1" * 20000 + "</p>",
    "<p>" + "1," * 10000 + "</p>",
    "<p>| " + "9" * 20000 + "</p>",
    "<p>Generation: " + "4" * 20000 + " Frequency: " + "5" * 20000 + "</p>",
])
def test_long_digit_runs_are_rejected_quickly(html):
    started = time.perf_counter()
    sample = extract_grid_metrics(html)
    elapsed = time.perf_counter() - started

    assert elapsed < 1.0
    assert sample.generation_mw is None
    assert sample.frequency_hz is None
    assert sample.load_trend_percent is None


# ============================================================
# STORED ROWS
# ============================================================

def test_from_row_reads_table_columns():
    sample = from_row({
        "generation_mw": 4100.0,
        "frequency": 49.2,
        "load_percent": -0.4,
        "status": "stressed",
        "source": "power.gov.ng",
        "created_at": None,
    })
    assert sample.frequency_hz == 49.2
    assert sample.load_trend_percent == -0.4
    assert sample.status == GridStatus.STRESSED


@pytest.mark.parametrize("stored, expected", [
    ("collapsed", GridStatus.UNKNOWN),
    ("STABLE", GridStatus.UNKNOWN),
    (None, GridStatus.STABLE),
])
def test_from_row_tolerates_statuses_outside_the_enum(stored, expected):
    sample = from_row({"generation_mw": 0.0, "frequency": None, "status": stored})
    assert sample.status == expected
    assert sample.generation_mw == 0.0
