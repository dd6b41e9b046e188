"""Read analysis exports from tab-delimited text streams."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterator, TextIO

from browser_exports.historytrends.analysis import DecodeSession, decode_record, format_offset
from browser_exports.historytrends.models import Export, ExportType, Visit

logger = logging.getLogger(__name__)


class AnalysisReader:
    """Iterate the visits of an analysis export.

    Records are decoded strictly in order through one DecodeSession. The
    first failing record raises and ends iteration; visits already yielded
    remain valid.

    Args:
        stream: Text stream of tab-delimited records without a header row.
        export_time: Time of export from outside the file, if any.
        filename: Name of the export, for diagnostics.
        **codec_options: Passed to DecodeSession.
    """

    def __init__(
        self,
        stream: TextIO,
        export_time: datetime | None = None,
        filename: str = "",
        **codec_options,
    ):
        self.filename = filename
        self._stream = stream
        self.session = DecodeSession(export_time, **codec_options)

    @property
    def export_time(self) -> datetime | None:
        """Export time, in the export's zone once the first record is read."""
        return self.session.export_time

    def __iter__(self) -> Iterator[Visit]:
        for line in self._stream:
            line = line.rstrip("\r\n")
            if not line:
                continue
            yield decode_record(self.session, line.split("\t"))


def read_analysis_export(
    stream: TextIO,
    filename: str = "",
    export_time: datetime | None = None,
    **codec_options,
) -> Export:
    """Read a complete analysis export.

    Nothing is returned when any record fails; the error propagates.
    """
    reader = AnalysisReader(stream, export_time, filename, **codec_options)
    visits = list(reader)
    offset = reader.session.offset_seconds
    logger.info(
        "Read %d visits from analysis export %s (%s)",
        len(visits),
        filename or "<stream>",
        format_offset(offset) if offset is not None else "no records",
    )
    return Export(
        filename=filename,
        type=ExportType.ANALYSIS,
        export_time=reader.export_time,
        visits=visits,
    )


def open_analysis_export(
    path: Path | str,
    export_time: datetime | None = None,
    **codec_options,
) -> Export:
    """Read an analysis export file from disk."""
    path = Path(path)
    with path.open(encoding="utf-8", newline="") as f:
        return read_analysis_export(f, path.name, export_time, **codec_options)
