"""Unified exception hierarchy for browser-exports."""

from __future__ import annotations


class BrowserExportError(Exception):
    """Base exception for all browser export errors."""


class ConfigError(BrowserExportError):
    """Invalid configuration, e.g. an unknown time zone name."""


# Records
class RecordError(BrowserExportError):
    """A single export record could not be decoded or encoded.

    Args:
        message: Human-readable description of the failure.
        record: 1-based index of the record within its export, if known.
        field: Name of the offending column.
        expected: Value derived from the other fields.
        actual: Value found in the record.
    """

    def __init__(
        self,
        message: str,
        *,
        record: int | None = None,
        field: str | None = None,
        expected: object = None,
        actual: object = None,
    ):
        super().__init__(message)
        self.message = message
        self.record = record
        self.field = field
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        parts = []
        if self.record is not None:
            parts.append(f"record {self.record}")
        if self.field:
            parts.append(self.field)
        prefix = ", ".join(parts)
        return f"{prefix}: {self.message}" if prefix else self.message


class MalformedFieldError(RecordError):
    """A column fails its own syntax (URL, integer, timestamp)."""


class InconsistentRedundancyError(RecordError):
    """Two fields describing the same fact disagree."""


class TimezoneDriftError(RecordError):
    """A record's timezone offset differs from the offset learned for its export."""


class UnknownTransitionError(RecordError):
    """Page transition token is not in the known vocabulary."""


# Sessions
class SessionAbortedError(BrowserExportError):
    """A decode session was used after it failed."""
