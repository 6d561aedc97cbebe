"""
Business calendar tests.

Tests:
1-2. Classification and precedence
3-4. Conflict handling (warning vs strict)
5.   Loading from a JSON file
"""

import json
import logging
from datetime import date

import pytest

from quote_engine.business_calendar import Calendar
from quote_engine.errors import CalendarConflict
from quote_engine.rate_tables import load_calendar

SATURDAY = date(2025, 6, 7)
MONDAY = date(2025, 6, 9)


def test_default_rule_is_monday_to_friday():
    calendar = Calendar.build()
    assert calendar.is_working_day(MONDAY)
    assert not calendar.is_working_day(SATURDAY)
    assert calendar.day_label(SATURDAY) == "Saturday"


def test_holiday_beats_working_weekend(caplog):
    """A date in both sets is a holiday."""
    with caplog.at_level(logging.WARNING):
        calendar = Calendar.build(holidays={SATURDAY: "Plant shutdown"},
                                  working_weekends=[SATURDAY])
    assert not calendar.is_working_day(SATURDAY)
    assert calendar.day_label(SATURDAY) == "Plant shutdown"


def test_conflict_logged_as_data_quality_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="quote_engine.business_calendar"):
        Calendar.build(holidays=[SATURDAY], working_weekends=[SATURDAY], version="test")
    assert "2025-06-07" in caplog.text
    assert "holiday takes precedence" in caplog.text


def test_conflict_raises_in_strict_mode():
    with pytest.raises(CalendarConflict) as exc:
        Calendar.build(holidays=[SATURDAY], working_weekends=[SATURDAY], strict=True)
    assert exc.value.dates == ["2025-06-07"]


def test_load_calendar_from_json(tmp_path):
    path = tmp_path / "calendar.json"
    path.write_text(json.dumps({
        "version": "test-1",
        "holidays": {"2025-06-09": "Founders Day"},
        "working_weekends": ["2025-06-07"],
    }))
    calendar = load_calendar(path)
    assert calendar.version == "test-1"
    assert not calendar.is_working_day(MONDAY)
    assert calendar.is_working_day(SATURDAY)

    path.write_text(json.dumps({"holidays": {"2025-06-07": "X"}, "working_weekends": ["2025-06-07"]}))
    with pytest.raises(CalendarConflict):
        load_calendar(path, strict=True)
