"""Tests for local-day and month window helpers."""
from __future__ import annotations

import datetime as dt

import pytest

from clinic_admin.utils import dates


def test_day_window_in_utc(monkeypatch):
    monkeypatch.setenv("CLINIC_ADMIN_TIMEZONE", "UTC")
    start, end = dates.day_window(dt.date(2026, 3, 5))
    assert start == dt.datetime(2026, 3, 5)
    assert end == dt.datetime(2026, 3, 6)


def test_day_window_shifts_for_local_zone(monkeypatch):
    monkeypatch.setenv("CLINIC_ADMIN_TIMEZONE", "Asia/Ho_Chi_Minh")
    start, end = dates.day_window(dt.date(2026, 3, 5))
    # UTC+7: local midnight is 17:00 UTC the previous day
    assert start == dt.datetime(2026, 3, 4, 17, 0)
    assert end == dt.datetime(2026, 3, 5, 17, 0)


def test_unknown_zone_falls_back_to_utc(monkeypatch):
    monkeypatch.setenv("CLINIC_ADMIN_TIMEZONE", "Mars/Olympus_Mons")
    assert dates.local_zone() is dt.timezone.utc


def test_month_window_handles_december(monkeypatch):
    monkeypatch.setenv("CLINIC_ADMIN_TIMEZONE", "UTC")
    start, end = dates.month_window("2025-12")
    assert start == dt.datetime(2025, 12, 1)
    assert end == dt.datetime(2026, 1, 1)


def test_previous_month_wraps_year():
    assert dates.previous_month("2026-01") == "2025-12"
    assert dates.previous_month("2026-03") == "2026-02"


@pytest.mark.parametrize("raw", ["2026-13", "2026-3", "26-03", ""])
def test_parse_month_rejects_malformed(raw):
    with pytest.raises(ValueError):
        dates.parse_month(raw)


def test_parse_day_is_strict():
    assert dates.parse_day("2026-03-05") == dt.date(2026, 3, 5)
    with pytest.raises(ValueError):
        dates.parse_day("05/03/2026")


def test_to_utc_naive_converts_aware_values():
    aware = dt.datetime(2026, 3, 5, 9, 0, tzinfo=dt.timezone(dt.timedelta(hours=7)))
    assert dates.to_utc_naive(aware) == dt.datetime(2026, 3, 5, 2, 0)
    naive = dt.datetime(2026, 3, 5, 9, 0)
    assert dates.to_utc_naive(naive) is naive


def test_display_date_uses_local_day(monkeypatch):
    monkeypatch.setenv("CLINIC_ADMIN_TIMEZONE", "Asia/Ho_Chi_Minh")
    assert dates.display_date(dt.datetime(2026, 3, 4, 18, 0)) == "05/03/2026"
    assert dates.display_date(dt.date(2026, 3, 4)) == "04/03/2026"
    assert dates.display_date(None) is None
