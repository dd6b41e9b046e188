"""Tests for hostname extraction and eTLD+1."""

import pytest

from browser_exports.exceptions import MalformedFieldError
from browser_exports.urlutil.hosts import effective_tld_plus_one, hostname, parse_url


def test_hostname_plain():
    assert hostname(parse_url("https://example.com/page")) == "example.com"


def test_hostname_strips_userinfo_and_port():
    assert hostname(parse_url("https://user:pw@example.com:8443/x")) == "example.com"


def test_hostname_preserves_case():
    assert hostname(parse_url("https://Example.COM/")) == "Example.COM"


def test_hostname_ipv6():
    assert hostname(parse_url("http://[::1]:8080/")) == "::1"


def test_hostname_empty_port():
    assert hostname(parse_url("http://example.com:/")) == "example.com"


def test_hostname_ignores_at_in_path():
    url = "https://web.archive.org/save/https://medium.com/@user/article"
    assert hostname(parse_url(url)) == "web.archive.org"


def test_hostname_no_host():
    assert hostname(parse_url("about:blank")) == ""


def test_parse_url_bad_ipv6():
    with pytest.raises(MalformedFieldError, match="invalid URL"):
        parse_url("http://[::1/")


def test_parse_url_bad_port():
    with pytest.raises(MalformedFieldError):
        parse_url("http://example.com:abc/")


def test_parse_url_control_character():
    with pytest.raises(MalformedFieldError, match="control character"):
        parse_url("http://example.com/\npath")


def test_etld_plus_one():
    assert effective_tld_plus_one("example.com") == "example.com"
    assert effective_tld_plus_one("sub.example.com") == "example.com"
    assert effective_tld_plus_one("accounts.google.co.uk") == "google.co.uk"


def test_etld_plus_one_private_suffix():
    assert effective_tld_plus_one("user.github.io") == "user.github.io"


def test_etld_plus_one_unlisted_suffix():
    assert effective_tld_plus_one("printer.lan") == "printer.lan"
    assert effective_tld_plus_one("a.printer.lan") == "printer.lan"


@pytest.mark.parametrize("host", ["", "com", "co.uk", "localhost", ".example.com", "example..com"])
def test_etld_plus_one_rejects(host):
    with pytest.raises(MalformedFieldError, match="cannot derive eTLD\\+1"):
        effective_tld_plus_one(host)
