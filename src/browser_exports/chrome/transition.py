"""Chromium page transition types.

A raw Chromium transition is a bitmask: bits 0-7 hold the core type (what
caused the navigation) and the high bits hold qualifier flags. Extension
APIs and exports built on them only expose the core type as a lowercase
token, e.g. "link" or "form_submit".

Source: ui/base/page_transition_types.h
"""

from __future__ import annotations

from enum import IntEnum

from browser_exports.exceptions import UnknownTransitionError

# Mask to extract the core type from a full transition value
CORE_MASK = 0xFF

# Qualifier flags (bits 8+), OR'd together with the core type
QUALIFIERS: dict[int, str] = {
    0x00800000: "FORWARD_BACK",
    0x01000000: "FROM_ADDRESS_BAR",
    0x02000000: "HOME_PAGE",
    0x04000000: "FROM_API",
    0x08000000: "CHAIN_START",
    0x10000000: "CHAIN_END",
    0x20000000: "CLIENT_REDIRECT",
    0x40000000: "SERVER_REDIRECT",
}


class PageTransition(IntEnum):
    """Core page transition type."""

    LINK = 0  # User clicked a link
    TYPED = 1  # User typed URL in omnibox
    AUTO_BOOKMARK = 2  # Auto-generated from bookmark
    AUTO_SUBFRAME = 3  # Subframe navigation (ads, iframes)
    MANUAL_SUBFRAME = 4  # User-initiated subframe nav
    GENERATED = 5  # Generated (e.g., from omnibox suggestion)
    AUTO_TOPLEVEL = 6  # Auto navigation at top level
    FORM_SUBMIT = 7  # Form submission
    RELOAD = 8  # Page reload
    KEYWORD = 9  # Omnibox keyword search
    KEYWORD_GENERATED = 10  # Generated from keyword

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def from_string(cls, token: str) -> PageTransition:
        """Look up a transition by its lowercase extension API token.

        Raises:
            UnknownTransitionError: The token is not a known core type.
        """
        try:
            return _BY_TOKEN[token]
        except KeyError:
            raise UnknownTransitionError(
                f"unknown page transition {token!r}",
                field="transition",
                actual=token,
            ) from None


_BY_TOKEN: dict[str, PageTransition] = {str(t): t for t in PageTransition}


def core_type(transition: int) -> PageTransition:
    """Strip qualifier flags from a raw Chromium transition value.

    Example:
        >>> core_type(0x01000001)
        <PageTransition.TYPED: 1>
    """
    core = transition & CORE_MASK
    try:
        return PageTransition(core)
    except ValueError:
        raise UnknownTransitionError(
            f"unknown core page transition {core}",
            field="transition",
            actual=transition,
        ) from None


def qualifier_names(transition: int) -> list[str]:
    """Names of the qualifier flags set on a raw transition value."""
    return [name for flag, name in QUALIFIERS.items() if transition & flag]
