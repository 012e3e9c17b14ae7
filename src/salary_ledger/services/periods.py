"""Calendar-month period tokens in the portal timezone."""

from __future__ import annotations

import calendar
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from salary_ledger.config import get_settings


def portal_tz() -> ZoneInfo:
    return ZoneInfo(get_settings().portal_timezone)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_portal_time(moment: datetime) -> datetime:
    """Convert to portal local time; naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(portal_tz())


def period_token(moment: datetime) -> str:
    """Return the "YYYY-MM" period a moment falls in."""
    return to_portal_time(moment).strftime("%Y-%m")


def period_label(period: str) -> str:
    """Human label for a period token: "2025-05" -> "May 2025"."""
    year, month = period.split("-")
    return f"{calendar.month_name[int(month)]} {int(year)}"


def is_allocation_day(day: int, moment: datetime) -> bool:
    """Whether `moment` is the scheduled allocation day of its month.

    Days past the end of a short month collapse to its last day, so a day-30
    schedule still runs on 28/29 February.
    """
    local = to_portal_time(moment)
    last_day = calendar.monthrange(local.year, local.month)[1]
    return local.day == min(day, last_day)
