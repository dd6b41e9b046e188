"""Tests for analysis export visit time resolution."""

from datetime import datetime, timedelta, timezone

import pytest

from browser_exports.exceptions import InconsistentRedundancyError, MalformedFieldError
from browser_exports.historytrends.times import (
    format_local,
    format_msec,
    parse_local,
    parse_msec,
    parse_weekday,
    resolve_visit_time,
    weekday_index,
)


def test_resolve_example_record():
    # Saturday afternoon in US Central time (UTC-6).
    t, offset = resolve_visit_time("1384634958041.754", "2013-11-16 14:49:18.041", "6")
    assert t == datetime(2013, 11, 16, 20, 49, 18, 41754, tzinfo=timezone.utc)
    assert offset == -6 * 3600


def test_resolve_east_of_utc():
    t, offset = resolve_visit_time("1623060000000", "2021-06-07 12:00:00.000", "1")
    assert t == datetime(2021, 6, 7, 10, 0, tzinfo=timezone.utc)
    assert offset == 2 * 3600


def test_resolve_utc():
    _, offset = resolve_visit_time("1623060000000", "2021-06-07 10:00:00.000", "1")
    assert offset == 0


def test_resolve_sub_millisecond_ignored_by_local_string():
    t, offset = resolve_visit_time("1623060000999.9", "2021-06-07 10:00:00.999", "1")
    assert offset == 0
    assert t.microsecond == 999900


def test_resolve_half_hour_offset():
    # India Standard Time, UTC+05:30.
    _, offset = resolve_visit_time("1623060000000", "2021-06-07 15:30:00.000", "1")
    assert offset == 5 * 3600 + 1800


def test_resolve_weekday_mismatch():
    # 2021-06-07 is a Monday, not a Sunday.
    with pytest.raises(InconsistentRedundancyError, match="inconsistent weekday") as exc_info:
        resolve_visit_time("1623060000000", "2021-06-07 10:00:00.000", "0")
    assert exc_info.value.field == "weekday"
    assert exc_info.value.expected == 1
    assert exc_info.value.actual == 0


def test_resolve_fractional_difference():
    with pytest.raises(InconsistentRedundancyError, match="fractional"):
        resolve_visit_time("1623060000500", "2021-06-07 10:00:00.000", "1")


def test_resolve_weekday_follows_local_date():
    # 23:30 Sunday in UTC is already Monday in UTC+2.
    _, offset = resolve_visit_time("1623022200000", "2021-06-07 01:30:00.000", "1")
    assert offset == 2 * 3600
    with pytest.raises(InconsistentRedundancyError):
        resolve_visit_time("1623022200000", "2021-06-07 01:30:00.000", "0")


@pytest.mark.parametrize("value", ["", "abc", "1e5", "1623060000000.", " 1623060000000"])
def test_parse_msec_malformed(value):
    with pytest.raises(MalformedFieldError) as exc_info:
        parse_msec(value)
    assert exc_info.value.field == "time_msec"


def test_parse_msec_fraction():
    t = parse_msec("1384634958041.754")
    assert t == datetime(2013, 11, 16, 20, 49, 18, 41754, tzinfo=timezone.utc)
    assert t.utcoffset() == timedelta(0)


def test_parse_msec_truncates_below_microseconds():
    assert parse_msec("1.0019").microsecond == 1001


def test_format_msec():
    t = datetime(2013, 11, 16, 20, 49, 18, 41754, tzinfo=timezone.utc)
    assert format_msec(t) == "1384634958041.754"
    assert format_msec(t.replace(microsecond=41000)) == "1384634958041"
    assert format_msec(t.replace(microsecond=41500)) == "1384634958041.5"


def test_format_msec_any_zone():
    t = datetime(2021, 6, 7, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_msec(t) == "1623060000000"


def test_format_msec_before_epoch():
    t = datetime(1969, 12, 31, 23, 59, 59, 998500, tzinfo=timezone.utc)
    assert format_msec(t) == "-1.5"
    assert parse_msec("-1.5") == t


@pytest.mark.parametrize(
    "value",
    [
        "2013-11-16 14:49:18",
        "2013-11-16 14:49:18.04",
        "2013-11-16 14:49:18.0412",
        "2013-11-16T14:49:18.041",
        "2013-13-16 14:49:18.041",
        "2013-02-30 14:49:18.041",
    ],
)
def test_parse_local_malformed(value):
    with pytest.raises(MalformedFieldError) as exc_info:
        parse_local(value)
    assert exc_info.value.field == "time_local"


def test_format_local_truncates_to_milliseconds():
    t = datetime(2013, 11, 16, 14, 49, 18, 41754)
    assert format_local(t) == "2013-11-16 14:49:18.041"
    assert parse_local(format_local(t)) == t.replace(microsecond=41000)


@pytest.mark.parametrize("value", ["", "x", "7", "-1", "1.0"])
def test_parse_weekday_malformed(value):
    with pytest.raises(MalformedFieldError):
        parse_weekday(value)


def test_weekday_index_sunday_first():
    assert weekday_index(datetime(2021, 6, 6)) == 0
    assert weekday_index(datetime(2021, 6, 7)) == 1
    assert weekday_index(datetime(2021, 6, 12)) == 6
