"""Chromium browser value types shared by export formats."""

from browser_exports.chrome.transition import PageTransition, core_type

__all__ = [
    "PageTransition",
    "core_type",
]
