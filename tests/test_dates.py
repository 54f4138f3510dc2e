"""
Tests for date coercion shared by the services
"""

from datetime import date, datetime, timedelta, timezone

from wedding_planner.utils.dates import as_date, as_naive_utc

def test_as_date_accepts_store_values():
    assert as_date(None) is None
    assert as_date(date(2025, 6, 14)) == date(2025, 6, 14)
    assert as_date(datetime(2025, 6, 14, 23, 30)) == date(2025, 6, 14)
    assert as_date("2025-06-14T00:00:00") == date(2025, 6, 14)

def test_as_naive_utc_converts_aware_values():
    aware = datetime(2025, 6, 14, 2, tzinfo=timezone(timedelta(hours=3)))

    assert as_naive_utc(aware) == datetime(2025, 6, 13, 23)
    assert as_naive_utc("2025-06-14T12:00:00Z") == datetime(2025, 6, 14, 12)
    assert as_naive_utc(datetime(2025, 6, 14, 12)) == datetime(2025, 6, 14, 12)
    assert as_naive_utc(date(2025, 6, 14)) == datetime(2025, 6, 14)
    assert as_naive_utc(None) is None
