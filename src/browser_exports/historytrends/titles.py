"""Page title normalization."""

from __future__ import annotations

import re

# C0 and C1 control characters, including tab and newline, which would
# otherwise break a tab-delimited record.
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def normalize_title(title: str) -> str:
    """Replace control characters with spaces and trim surrounding whitespace.

    Idempotent: a normalized title normalizes to itself.
    """
    return _CONTROL_CHARS.sub(" ", title).strip()
