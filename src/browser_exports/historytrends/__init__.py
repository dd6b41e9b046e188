"""History Trends Unlimited browsing history exports."""

from browser_exports.historytrends.analysis import (
    DecodeSession,
    EncodeSession,
    check_url,
    decode_record,
    encode_record,
)
from browser_exports.historytrends.models import Export, ExportType, Visit
from browser_exports.historytrends.reader import (
    AnalysisReader,
    open_analysis_export,
    read_analysis_export,
)
from browser_exports.historytrends.times import resolve_visit_time
from browser_exports.historytrends.titles import normalize_title
from browser_exports.historytrends.writer import AnalysisWriter, write_analysis_export

__all__ = [
    "AnalysisReader",
    "AnalysisWriter",
    "DecodeSession",
    "EncodeSession",
    "Export",
    "ExportType",
    "Visit",
    "check_url",
    "decode_record",
    "encode_record",
    "normalize_title",
    "open_analysis_export",
    "read_analysis_export",
    "resolve_visit_time",
    "write_analysis_export",
]
