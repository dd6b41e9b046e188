"""Data models for History Trends Unlimited exports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from browser_exports.chrome.transition import PageTransition


@dataclass(frozen=True)
class Visit:
    """A page visit in browsing history.

    URL and visit time combined are unique within an export. The visit time
    is an aware datetime in UTC. Only the core transition type survives an
    export; qualifier flags are lost.
    """

    url: str
    visit_time: datetime  # UTC
    transition: PageTransition
    page_title: str = ""


class ExportType(Enum):
    """Format of a History Trends export."""

    ANALYSIS = "analysis"
    ARCHIVED = "archived"

    def __str__(self) -> str:
        return self.value


@dataclass
class Export:
    """Browsing history exported from History Trends Unlimited.

    The export time is in the local zone at the time the export was
    created. Until that zone is known it is labeled UTC.
    """

    filename: str  # tsv name within an archive or as given
    type: ExportType
    export_time: datetime | None = None
    visits: list[Visit] = field(default_factory=list)
