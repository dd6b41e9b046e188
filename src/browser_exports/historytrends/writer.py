"""Write analysis exports as tab-delimited text streams."""

from __future__ import annotations

import logging
import re
from datetime import tzinfo
from typing import Iterable, TextIO

from browser_exports.exceptions import BrowserExportError, MalformedFieldError
from browser_exports.historytrends.analysis import FIELDS, EncodeSession, encode_record
from browser_exports.historytrends.models import Export, ExportType, Visit

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\t\r\n]")


class AnalysisWriter:
    """Write visits as analysis export records.

    Args:
        stream: Text stream to write records to.
        location: Zone the export is labeled with; see EncodeSession.
        **codec_options: Passed to EncodeSession.
    """

    def __init__(
        self,
        stream: TextIO,
        location: tzinfo | str | None = None,
        **codec_options,
    ):
        self._stream = stream
        self.session = EncodeSession(location, **codec_options)

    def write(self, visit: Visit) -> None:
        fields = encode_record(self.session, visit)
        for name, value in zip(FIELDS, fields):
            if _SEPARATORS.search(value):
                raise MalformedFieldError(
                    "field contains a tab or line break",
                    record=self.session.record_index,
                    field=name,
                    actual=value,
                )
        self._stream.write("\t".join(fields) + "\n")

    def write_all(self, visits: Iterable[Visit]) -> int:
        """Write every visit; returns the number written."""
        count = 0
        for visit in visits:
            self.write(visit)
            count += 1
        return count


def write_analysis_export(
    stream: TextIO,
    export: Export,
    location: tzinfo | str | None = None,
) -> int:
    """Write an Export as an analysis export.

    Without a location, the zone of the export time is used when known.
    """
    if export.type is not ExportType.ANALYSIS:
        raise BrowserExportError(f"Cannot write {export.type} export as analysis export")
    if location is None and export.export_time is not None:
        location = export.export_time.tzinfo
    count = AnalysisWriter(stream, location).write_all(export.visits)
    logger.info("Wrote %d visits to analysis export %s", count, export.filename or "<stream>")
    return count
