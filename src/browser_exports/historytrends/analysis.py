"""Analysis export ("Export These Results") record codec.

An analysis export is a tab-delimited file created by clicking "Export
These Results" on the Trends or Search pages of History Trends Unlimited.
Each record has these fields:

    0: URL                  visited URL
    1: Host*                hostname of visited URL
    2: Domain*              public suffix + 1 of visited URL
    3: Visit Time (ms)      milliseconds since 1970-01-01 UTC  e.g. 1384634958041.754
    4: Visit Time (string)  local time                         e.g. 2013-11-16 14:49:18.041
    5: Day of Week          local day of the week              0 for Sunday
    6: Transition Type      how the browser navigated to URL   e.g. link
    7: Page Title*          page title of visited URL
    * column can be blank

Host and domain are derived from the URL; the time string and day of the
week are less precise than the millisecond time. These fields are checked
for consistency, then discarded.

The time string is in the exporter's local time, so the UTC offset of an
export is learned from its first record and every later record must agree.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, tzinfo
from typing import Callable, Sequence
from urllib.parse import SplitResult, unquote

from dateutil import tz

from browser_exports.chrome.transition import PageTransition
from browser_exports.exceptions import (
    ConfigError,
    InconsistentRedundancyError,
    MalformedFieldError,
    RecordError,
    SessionAbortedError,
    TimezoneDriftError,
)
from browser_exports.historytrends.models import Visit
from browser_exports.historytrends.times import (
    format_local,
    format_msec,
    resolve_visit_time,
    weekday_index,
)
from browser_exports.historytrends.titles import normalize_title
from browser_exports.urlutil.hosts import effective_tld_plus_one, hostname, parse_url

logger = logging.getLogger(__name__)

FIELDS = (
    "url",
    "host",
    "domain",
    "time_msec",
    "time_local",
    "weekday",
    "transition",
    "title",
)

# Zone that encoded exports are labeled with when none is given.
DEFAULT_LOCATION = os.environ.get("BROWSER_EXPORTS_TZ", "UTC")


def check_url(
    raw_url: str,
    host: str,
    domain: str,
    etld_plus_one: Callable[[str], str] = effective_tld_plus_one,
) -> None:
    """Check the host and domain columns against the URL.

    Either column may be blank, in which case it is not checked.
    """
    parts = parse_url(raw_url)
    if host:
        computed = hostname(parts)
        if computed != host:
            if not _exporter_misreads_host(parts):
                raise InconsistentRedundancyError(
                    f"{host!r} differs from computed host {computed!r}",
                    field="host",
                    expected=computed,
                    actual=host,
                )
            logger.debug("Tolerating host %r for %s: @ in path", host, raw_url)
    if domain:
        tld1 = etld_plus_one(host)
        if tld1 != domain:
            raise InconsistentRedundancyError(
                f"{domain!r} differs from computed eTLD+1 {tld1!r}",
                field="domain",
                expected=tld1,
                actual=domain,
            )


def _exporter_misreads_host(parts: SplitResult) -> bool:
    """Whether the exporter reports the wrong host for this URL.

    When the URL path contains @, utils.extractHost in the extension's
    utils.js returns the segment after the @. For example, it reports the
    host of https://web.archive.org/save/https://medium.com/@user/article
    as "user" instead of "web.archive.org".
    """
    return "@" in unquote(parts.path)


class DecodeSession:
    """State for decoding the records of one analysis export in order.

    The UTC offset is learned from the first record. Any failure aborts the
    session; visits already returned remain valid. Not safe for concurrent
    use.

    Args:
        export_time: Time of export from outside the file, e.g. an archive
            timestamp. Its wall clock is taken as local time labeled UTC
            (naive values are labeled UTC) and is corrected to the export's
            zone once the first record is decoded.
        transition_decoder: Maps a transition token to a PageTransition.
        etld_plus_one: Computes the registrable domain of a host.
        title_normalizer: Idempotent page title cleanup.
    """

    def __init__(
        self,
        export_time: datetime | None = None,
        *,
        transition_decoder: Callable[[str], PageTransition] = PageTransition.from_string,
        etld_plus_one: Callable[[str], str] = effective_tld_plus_one,
        title_normalizer: Callable[[str], str] = normalize_title,
    ):
        if export_time is not None and export_time.tzinfo is None:
            export_time = export_time.replace(tzinfo=tz.tzutc())
        self.export_time = export_time
        self.transition_decoder = transition_decoder
        self.etld_plus_one = etld_plus_one
        self.title_normalizer = title_normalizer
        self.record_index = 0
        self.offset_seconds: int | None = None
        self.error: RecordError | None = None

    @property
    def aborted(self) -> bool:
        return self.error is not None

    def decode(self, fields: Sequence[str]) -> Visit:
        return decode_record(self, fields)

    def _learn_offset(self, offset: int) -> None:
        self.offset_seconds = offset
        zone = tz.tzoffset(None, offset)
        if self.export_time is not None:
            self.export_time = (self.export_time - timedelta(seconds=offset)).astimezone(zone)
        logger.debug("Learned export timezone offset %s", format_offset(offset))


def decode_record(session: DecodeSession, fields: Sequence[str]) -> Visit:
    """Decode the next record of an export into a Visit.

    Raises:
        SessionAbortedError: An earlier record of the session failed.
        RecordError: The record is malformed or inconsistent. The session
            is aborted.
    """
    if session.error is not None:
        raise SessionAbortedError(
            f"decode session aborted by earlier failure: {session.error}"
        )
    record = session.record_index + 1
    try:
        visit = _decode_fields(session, fields)
    except RecordError as e:
        e.record = record
        session.error = e
        raise
    session.record_index = record
    return visit


def _decode_fields(session: DecodeSession, fields: Sequence[str]) -> Visit:
    if len(fields) != len(FIELDS):
        raise MalformedFieldError(
            f"record has {len(fields)} fields, want {len(FIELDS)}",
            expected=len(FIELDS),
            actual=len(fields),
        )
    raw_url, host, domain, time_msec, time_local, weekday, transition, title = fields
    if not raw_url:
        raise MalformedFieldError("URL is required", field="url", actual=raw_url)

    check_url(raw_url, host, domain, session.etld_plus_one)

    visit_time, offset = resolve_visit_time(time_msec, time_local, weekday)
    if session.record_index == 0:
        session._learn_offset(offset)
    elif offset != session.offset_seconds:
        # A single export cannot span two UTC offsets.
        raise TimezoneDriftError(
            f"{format_offset(offset)} differs from timezone offset "
            f"{format_offset(session.offset_seconds)}",
            field="time_local",
            expected=session.offset_seconds,
            actual=offset,
        )

    # The transition token only contains the core type, so qualifiers are
    # lost.
    typ = session.transition_decoder(transition)

    return Visit(
        url=raw_url,
        visit_time=visit_time,
        transition=typ,
        page_title=session.title_normalizer(title),
    )


class EncodeSession:
    """Settings for encoding visits as analysis export records.

    Args:
        location: Zone the export is labeled with, as a tzinfo or an IANA
            name. Defaults to $BROWSER_EXPORTS_TZ, else UTC.
        transition_encoder: Maps a PageTransition to its token.
        etld_plus_one: Computes the registrable domain of a host.
    """

    def __init__(
        self,
        location: tzinfo | str | None = None,
        *,
        transition_encoder: Callable[[PageTransition], str] = str,
        etld_plus_one: Callable[[str], str] = effective_tld_plus_one,
    ):
        if location is None:
            location = DEFAULT_LOCATION
        if isinstance(location, str):
            zone = tz.gettz(location)
            if zone is None:
                raise ConfigError(f"Unknown time zone: {location!r}")
            location = zone
        self.location = location
        self.transition_encoder = transition_encoder
        self.etld_plus_one = etld_plus_one
        self.record_index = 0

    def encode(self, visit: Visit) -> list[str]:
        return encode_record(self, visit)


def encode_record(session: EncodeSession, visit: Visit) -> list[str]:
    """Encode a Visit as the fields of an analysis export record."""
    record = session.record_index + 1
    try:
        fields = _encode_visit(session, visit)
    except RecordError as e:
        e.record = record
        raise
    session.record_index = record
    return fields


def _encode_visit(session: EncodeSession, visit: Visit) -> list[str]:
    parts = parse_url(visit.url)
    host = hostname(parts)
    # The extension leaves the domain blank for hosts without a dot, such
    # as localhost.
    domain = session.etld_plus_one(host) if "." in host else ""

    if visit.visit_time.tzinfo is None:
        raise MalformedFieldError(
            "visit time has no time zone", field="time_msec", actual=visit.visit_time
        )
    local = visit.visit_time.astimezone(session.location)
    return [
        visit.url,
        host,
        domain,
        format_msec(visit.visit_time),
        format_local(local),
        str(weekday_index(local)),
        session.transition_encoder(visit.transition),
        visit.page_title,
    ]


def format_offset(seconds: int) -> str:
    """Format a UTC offset in seconds east of UTC, e.g. UTC-05:00."""
    sign = "-" if seconds < 0 else "+"
    hours, rem = divmod(abs(seconds), 3600)
    minutes, secs = divmod(rem, 60)
    text = f"UTC{sign}{hours:02d}:{minutes:02d}"
    if secs:
        text += f":{secs:02d}"
    return text
