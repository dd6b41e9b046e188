"""Hostname extraction and effective TLD+1 computation."""

from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit

import tldextract

from browser_exports.exceptions import MalformedFieldError

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

# Bundled Public Suffix List snapshot only; never fetch the list over the
# network. Private suffixes (e.g. github.io) count as public suffixes.
_extract = tldextract.TLDExtract(
    suffix_list_urls=(),
    include_psl_private_domains=True,
)


def parse_url(raw_url: str) -> SplitResult:
    """Split a URL, rejecting ones that cannot be parsed."""
    if _CONTROL_CHARS.search(raw_url):
        raise MalformedFieldError(
            "invalid control character in URL", field="url", actual=raw_url
        )
    try:
        parts = urlsplit(raw_url)
        parts.port  # raises for a non-numeric or out of range port
    except ValueError as e:
        raise MalformedFieldError(
            f"invalid URL: {e}", field="url", actual=raw_url
        ) from e
    return parts


def hostname(parts: SplitResult) -> str:
    """Return the host of a split URL without userinfo, port or brackets.

    Unlike SplitResult.hostname, case is preserved.
    """
    host = parts.netloc.rpartition("@")[2]
    if host.startswith("["):
        return host[1:host.find("]")]
    name, colon, port = host.rpartition(":")
    if colon and (not port or port.isdigit()):
        return name
    return host


def effective_tld_plus_one(host: str) -> str:
    """Return the public suffix of a host plus one more label.

    Hosts under a suffix missing from the list fall back to the list's
    default rule, where the last label is the suffix.

    Examples:
        sub.example.com -> example.com
        accounts.google.co.uk -> google.co.uk
        printer.lan -> printer.lan
    """
    if not host or host.startswith(".") or host.endswith(".") or ".." in host:
        raise MalformedFieldError(
            f"cannot derive eTLD+1 from {host!r}: empty label",
            field="host",
            actual=host,
        )
    extracted = _extract(host)
    if not extracted.suffix:
        labels = host.split(".")
        if len(labels) < 2:
            raise MalformedFieldError(
                f"cannot derive eTLD+1 from {host!r}: single label",
                field="host",
                actual=host,
            )
        return ".".join(labels[-2:])
    if not extracted.domain:
        raise MalformedFieldError(
            f"cannot derive eTLD+1 from {host!r}: host is a public suffix",
            field="host",
            actual=host,
        )
    return f"{extracted.domain}.{extracted.suffix}"
