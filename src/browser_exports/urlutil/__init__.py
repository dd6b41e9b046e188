"""URL parsing and registrable-domain helpers."""

from browser_exports.urlutil.hosts import effective_tld_plus_one, hostname, parse_url

__all__ = [
    "effective_tld_plus_one",
    "hostname",
    "parse_url",
]
