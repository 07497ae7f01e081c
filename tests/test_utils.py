# File: tests/test_utils.py
from urllib.parse import urlsplit

import pytest

from crawl_scout.utils import (
    clamp,
    is_http_url,
    is_same_domain,
    normalize_url,
    remove_duplicates,
    to_absolute_url,
)

URLS = [
    "https://example.com",
    "https://example.com/",
    "https://example.com/a/b/",
    "https://example.com/a?q=1&r=2",
    "https://example.com/a?next=/b/",
    "https://Example.COM/Path/#top",
    "http://example.com:8080/x//",
    "https://user:pw@Example.com/p",
    "mailto:someone@example.com",
]


@pytest.mark.parametrize("url", URLS)
def test_normalize_is_idempotent(url):
    once = normalize_url(url)
    assert once is not None
    assert normalize_url(once) == once


def test_fragment_is_stripped():
    assert normalize_url("https://example.com/path#section") == normalize_url("https://example.com/path")
    assert normalize_url("https://example.com/path#section") == "https://example.com/path"


def test_trailing_slashes_are_removed():
    assert normalize_url("https://example.com/a/") == normalize_url("https://example.com/a")
    assert normalize_url("https://example.com///") == "https://example.com"


def test_query_port_and_path_case_are_kept():
    assert normalize_url("https://example.com:443/Docs?b=2&a=1") == "https://example.com:443/Docs?b=2&a=1"


def test_scheme_and_host_are_lowercased():
    assert normalize_url("HTTPS://WWW.Example.com/A") == "https://www.example.com/A"


@pytest.mark.parametrize(
    "raw",
    ["", "   ", "example.com/path", "/relative/path", "http://", "https://example.com:99999/", "http://[::1"],
)
def test_unparseable_urls_normalize_to_none(raw):
    assert normalize_url(raw) is None


def test_normalize_rejects_non_strings():
    assert normalize_url(None) is None  # type: ignore[arg-type]


def test_same_domain_is_exact_hostname_match():
    origin = urlsplit("https://example.com/start")
    assert is_same_domain("https://example.com/other", origin)
    assert is_same_domain("http://EXAMPLE.com:8080/x", origin)
    assert not is_same_domain("https://www.example.com/", origin)
    assert not is_same_domain("https://sub.example.com/", origin)
    assert not is_same_domain("https://example.com.evil.org/", origin)
    assert not is_same_domain("mailto:a@example.com", origin)
    assert not is_same_domain("http://[::1", origin)


def test_same_domain_accepts_string_origin():
    assert is_same_domain("https://example.com/a", "https://example.com")


@pytest.mark.parametrize(
    "value,expected",
    [
        ("https://example.com", True),
        ("http://localhost:4000/x", True),
        ("ftp://example.com/file", False),
        ("javascript:alert(1)", False),
        ("example.com", False),
        ("http://", False),
        (42, False),
        (None, False),
    ],
)
def test_is_http_url(value, expected):
    assert is_http_url(value) is expected


def test_to_absolute_url():
    assert to_absolute_url("/b", "https://example.com/a/") == "https://example.com/b"
    assert to_absolute_url("c", "https://example.com/a/") == "https://example.com/a/c"
    assert to_absolute_url("https://other.org", "https://example.com") == "https://other.org"
    assert to_absolute_url("", "https://example.com") is None
    assert to_absolute_url(None, "https://example.com") is None


def test_remove_duplicates_keeps_first_seen_order():
    assert remove_duplicates(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


@pytest.mark.parametrize("value,expected", [(-5, 1), (1, 1), (7, 7), (20, 20), (99, 20)])
def test_clamp(value, expected):
    assert clamp(value, 1, 20) == expected


def test_spaces_in_path_and_query_are_percent_encoded():
    assert normalize_url("https://example.com/a b") == "https://example.com/a%20b"
    assert normalize_url("https://example.com/a b") == normalize_url("https://example.com/a%20b")
    assert normalize_url("https://example.com/s?q=a b") == "https://example.com/s?q=a%20b"


def test_non_ascii_path_is_encoded_once():
    once = normalize_url("https://example.com/café")
    assert once == "https://example.com/caf%C3%A9"
    assert normalize_url(once) == once


@pytest.mark.parametrize("raw", ["https://exa mple.com/", "https://exa<mple.com", "http://a|b.com/x"])
def test_hosts_with_forbidden_characters_are_rejected(raw):
    assert normalize_url(raw) is None
    assert not is_http_url(raw)
