"""Visit time fields of an analysis export.

Each record stores one visit time three ways: milliseconds since the Unix
epoch in UTC with sub-millisecond precision, a local time string truncated
to milliseconds, and the local day of the week. Resolving them yields the
UTC instant and the UTC offset the exporter's clock was in.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from decimal import ROUND_FLOOR, Decimal

from dateutil import tz

from browser_exports.exceptions import InconsistentRedundancyError, MalformedFieldError

EPOCH = datetime(1970, 1, 1, tzinfo=tz.tzutc())

# e.g. 1384634958041.754
_MSEC_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")
# e.g. 2013-11-16 14:49:18.041
_LOCAL_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3}")
_WEEKDAY_PATTERN = re.compile(r"[+-]?\d+")

WEEKDAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

_MILLISECOND = timedelta(milliseconds=1)
_SECOND = timedelta(seconds=1)


def resolve_visit_time(time_msec: str, time_local: str, weekday: str) -> tuple[datetime, int]:
    """Reconcile the three time fields of a record.

    Returns the visit time in UTC and the offset of the local time from UTC
    in seconds, positive east of UTC (local = UTC + offset).

    Raises:
        MalformedFieldError: A field does not parse.
        InconsistentRedundancyError: The fields describe different instants
            or the day of the week does not match the local date.
    """
    utc = parse_msec(time_msec)
    local = parse_local(time_local)

    # Both fields describe the same instant; the local string is truncated
    # to milliseconds, so only a whole number of seconds may separate them.
    truncated = utc - (utc - EPOCH) % _MILLISECOND
    diff = local - truncated.replace(tzinfo=None)
    if diff % _SECOND:
        raise InconsistentRedundancyError(
            f"time difference is fractional: {diff}",
            field="time_local",
            expected=format_local(truncated),
            actual=time_local,
        )
    offset = diff // _SECOND

    day = parse_weekday(weekday)
    computed = weekday_index(local)
    if day != computed:
        raise InconsistentRedundancyError(
            f"inconsistent weekday: {WEEKDAYS[day]} and {WEEKDAYS[computed]}",
            field="weekday",
            expected=computed,
            actual=day,
        )
    return utc, offset


def parse_msec(value: str) -> datetime:
    """Parse fractional milliseconds since the epoch as an aware UTC datetime.

    Precision beyond microseconds is truncated.
    """
    if not _MSEC_PATTERN.fullmatch(value):
        raise MalformedFieldError(
            "invalid millisecond timestamp", field="time_msec", actual=value
        )
    micros = int((Decimal(value) * 1000).to_integral_value(rounding=ROUND_FLOOR))
    try:
        return EPOCH + timedelta(microseconds=micros)
    except OverflowError as e:
        raise MalformedFieldError(
            "millisecond timestamp out of range", field="time_msec", actual=value
        ) from e


def format_msec(t: datetime) -> str:
    """Format an aware datetime as milliseconds since the epoch.

    The fraction is only written when non-zero, without trailing zeros.
    """
    micros = (t - EPOCH) // timedelta(microseconds=1)
    sign = "-" if micros < 0 else ""
    msec, frac = divmod(abs(micros), 1000)
    if frac:
        return f"{sign}{msec}.{frac:03d}".rstrip("0")
    return f"{sign}{msec}"


def parse_local(value: str) -> datetime:
    """Parse a "YYYY-MM-DD HH:MM:SS.mmm" local time as a naive datetime."""
    if not _LOCAL_PATTERN.fullmatch(value):
        raise MalformedFieldError(
            "local time is not YYYY-MM-DD HH:MM:SS.mmm",
            field="time_local",
            actual=value,
        )
    try:
        return datetime.strptime(value, "%Y-%m-%d %H:%M:%S.%f")
    except ValueError as e:
        raise MalformedFieldError(
            f"invalid local time: {e}", field="time_local", actual=value
        ) from e


def format_local(t: datetime) -> str:
    """Format the wall clock of a datetime, truncated to milliseconds."""
    return (
        f"{t.year:04d}-{t.month:02d}-{t.day:02d} "
        f"{t.hour:02d}:{t.minute:02d}:{t.second:02d}.{t.microsecond // 1000:03d}"
    )


def parse_weekday(value: str) -> int:
    """Parse a day of the week index, 0 for Sunday."""
    if not _WEEKDAY_PATTERN.fullmatch(value):
        raise MalformedFieldError(
            "day of week is not an integer", field="weekday", actual=value
        )
    day = int(value)
    if not 0 <= day <= 6:
        raise MalformedFieldError(
            f"day of week {day} out of range 0-6", field="weekday", actual=value
        )
    return day


def weekday_index(t: datetime) -> int:
    """Day of the week of a datetime's wall clock, 0 for Sunday."""
    return t.isoweekday() % 7
