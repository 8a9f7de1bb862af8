"""
Billing window derivation.

Two policies exist for the scheduled trigger:
- previous_month: the full calendar month before "now" (default)
- trailing_month: same day last month through yesterday

Explicit {year, month} requests always use month_window().
"""

import calendar
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from invoice_mailer.core.models import InvalidWindowError, TimeWindow

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

PREVIOUS_MONTH = "previous_month"
TRAILING_MONTH = "trailing_month"
WINDOW_POLICIES = (PREVIOUS_MONTH, TRAILING_MONTH)

END_OF_DAY = time(23, 59, 59)


def _epoch(day: date, at: time, zone: ZoneInfo) -> int:
    return int(datetime.combine(day, at, tzinfo=zone).timestamp())


def _localize(now: datetime | None, zone: ZoneInfo) -> datetime:
    if now is None:
        return datetime.now(zone)
    if now.tzinfo is None:
        return now.replace(tzinfo=zone)
    return now.astimezone(zone)


def parse_year_month(year, month) -> tuple[int, int]:
    """
    Validate raw trigger input.

    Accepts ints or numeric strings (e.g. from a JSON form).

    Raises:
        InvalidWindowError: missing, non-numeric, or out-of-range values
    """
    if year in (None, "") or month in (None, ""):
        raise InvalidWindowError("Please provide both year and month.")
    try:
        parsed_year = int(str(year).strip())
        parsed_month = int(str(month).strip())
    except ValueError:
        raise InvalidWindowError("Invalid year or month.")
    if not 1 <= parsed_month <= 12 or not 1 <= parsed_year <= 9999:
        raise InvalidWindowError("Invalid year or month.")
    return parsed_year, parsed_month


def month_window(year: int, month: int, tz: str = "UTC") -> TimeWindow:
    """Window covering one calendar month, first day 00:00:00 to last day 23:59:59."""
    if not 1 <= month <= 12:
        raise InvalidWindowError(f"Invalid month: {month}")
    zone = ZoneInfo(tz)
    last_day = calendar.monthrange(year, month)[1]
    month_name = MONTH_NAMES[month - 1]
    return TimeWindow(
        start=_epoch(date(year, month, 1), time.min, zone),
        end=_epoch(date(year, month, last_day), END_OF_DAY, zone),
        period=f"{month_name}-{year}",
        description=f"{month_name} {year}",
        year=year,
        month=month,
    )


def previous_month_window(now: datetime | None = None, tz: str = "UTC") -> TimeWindow:
    """Full calendar month before now."""
    zone = ZoneInfo(tz)
    today = _localize(now, zone).date()
    last_of_previous = today.replace(day=1) - timedelta(days=1)
    return month_window(last_of_previous.year, last_of_previous.month, tz)


def trailing_month_window(now: datetime | None = None, tz: str = "UTC") -> TimeWindow:
    """Same day of the previous month (clamped) through yesterday."""
    zone = ZoneInfo(tz)
    today = _localize(now, zone).date()

    if today.month == 1:
        year, month = today.year - 1, 12
    else:
        year, month = today.year, today.month - 1
    start_day = min(today.day, calendar.monthrange(year, month)[1])
    start_date = date(year, month, start_day)
    end_date = today - timedelta(days=1)

    return TimeWindow(
        start=_epoch(start_date, time.min, zone),
        end=_epoch(end_date, END_OF_DAY, zone),
        period=f"{start_date.isoformat()}_to_{end_date.isoformat()}",
        description=f"{start_date.isoformat()} to {end_date.isoformat()}",
    )


def scheduled_window(
    policy: str = PREVIOUS_MONTH,
    now: datetime | None = None,
    tz: str = "UTC",
) -> TimeWindow:
    """Window for a parameterless (scheduled) run."""
    if policy == PREVIOUS_MONTH:
        return previous_month_window(now, tz)
    if policy == TRAILING_MONTH:
        return trailing_month_window(now, tz)
    raise ValueError(f"Unknown window policy: {policy}. Use one of {WINDOW_POLICIES}")
