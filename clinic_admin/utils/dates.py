"""Date helpers shared by daily views and the labo report.

Timestamps are persisted as naive UTC. Day and month windows are computed in
the clinic's local zone (`config.timezone_name()`) and converted back to naive
UTC bounds; upper bounds are exclusive.
"""
from __future__ import annotations

import datetime as dt
import re
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from clinic_admin import config as app_config
from clinic_admin.utils.logging import get_logger

LOG = get_logger("dates")

DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")
DISPLAY_FORMAT = "%d/%m/%Y"


def local_zone() -> dt.tzinfo:
    name = app_config.timezone_name()
    if name.upper() == "UTC":
        return dt.timezone.utc
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        LOG.warning("Unknown timezone %s; falling back to UTC", name)
        return dt.timezone.utc


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


def to_local(value: dt.datetime) -> dt.datetime:
    return value.replace(tzinfo=dt.timezone.utc).astimezone(local_zone())


def to_utc_naive(value: Optional[dt.datetime]) -> Optional[dt.datetime]:
    """Normalize request datetimes for storage; naive input is taken as UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)


def local_today() -> dt.date:
    return to_local(utcnow()).date()


def local_date(value: dt.datetime) -> dt.date:
    return to_local(value).date()


def _local_midnight_utc(day: dt.date) -> dt.datetime:
    local = dt.datetime.combine(day, dt.time.min).replace(tzinfo=local_zone())
    return local.astimezone(dt.timezone.utc).replace(tzinfo=None)


def parse_day(raw: str) -> dt.date:
    """Parse a strict YYYY-MM-DD string; raises ValueError otherwise."""
    if not isinstance(raw, str) or not DAY_RE.match(raw):
        raise ValueError(f"invalid day: {raw!r}")
    return dt.date.fromisoformat(raw)


def day_window(day: dt.date) -> Tuple[dt.datetime, dt.datetime]:
    return _local_midnight_utc(day), _local_midnight_utc(day + dt.timedelta(days=1))


def parse_month(raw: str) -> Tuple[int, int]:
    if not isinstance(raw, str) or not MONTH_RE.match(raw):
        raise ValueError(f"invalid month: {raw!r}")
    year, month = raw.split("-")
    return int(year), int(month)


def month_window(raw: str) -> Tuple[dt.datetime, dt.datetime]:
    year, month = parse_month(raw)
    first = dt.date(year, month, 1)
    following = dt.date(year + 1, 1, 1) if month == 12 else dt.date(year, month + 1, 1)
    return _local_midnight_utc(first), _local_midnight_utc(following)


def previous_month(raw: str) -> str:
    year, month = parse_month(raw)
    if month == 1:
        return f"{year - 1}-12"
    return f"{year}-{month - 1:02d}"


def iso(value: Optional[dt.date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def display_date(value: Optional[dt.date]) -> Optional[str]:
    """DD/MM/YYYY; datetimes are shown in the local zone."""
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        value = local_date(value)
    return value.strftime(DISPLAY_FORMAT)


__all__ = [
    "local_zone",
    "utcnow",
    "to_local",
    "to_utc_naive",
    "local_today",
    "local_date",
    "parse_day",
    "day_window",
    "parse_month",
    "month_window",
    "previous_month",
    "iso",
    "display_date",
]
