import pytest

from render_proxy.components.gate.url_gate import AuthorizedUrl, UrlGate, parse_hostname, strip_query_suffix
from render_proxy.core.exceptions import DomainNotAllowedError, InvalidUrlError, UrlDeniedError


@pytest.fixture
def gate():
    return UrlGate(["example.com"])


def test_authorize_allowed_host(gate):
    authorized = gate.authorize("http://example.com/page")
    assert authorized == AuthorizedUrl(url="http://example.com/page", hostname="example.com")


def test_authorize_https_and_port(gate):
    assert gate.authorize("https://example.com:8443/a/b").url == "https://example.com:8443/a/b"


def test_host_match_is_case_insensitive(gate):
    assert gate.authorize("http://EXAMPLE.com/").hostname == "example.com"


@pytest.mark.parametrize("url", [
    "http://evil.com/page",
    "http://sub.example.com/",
    "http://example.com.evil.com/",
    "http://notexample.com/",
    "http://example.com@evil.com/",
    "http://127.0.0.1/",
    "http://localhost:8080/",
])
def test_hosts_outside_allowlist_are_denied(gate, url):
    with pytest.raises(DomainNotAllowedError) as excinfo:
        gate.authorize(url)
    assert excinfo.value.reason == "DomainNotAllowed"


@pytest.mark.parametrize("url", [
    "http://example.com/",
    "not a url",
    "",
    "javascript:alert(1)",
])
def test_empty_allowlist_denies_everything(url):
    gate = UrlGate([])
    with pytest.raises(DomainNotAllowedError):
        gate.authorize(url)


def test_blank_allowlist_entries_are_ignored():
    gate = UrlGate(["", "  "])
    assert gate.allowed_domains == frozenset()
    with pytest.raises(DomainNotAllowedError):
        gate.authorize("http://example.com/")


@pytest.mark.parametrize("url", [
    "",
    "   ",
    "example.com",
    "example.com/page",
    "//example.com/page",
    "/relative/path",
    "http:/example.com",
    "http://",
    "http://exa mple.com/",
    "http://example.com/<script>",
    "http://example.com/%zz",
    "http://example.com/%4",
    "http://example.com:99999/",
    "mailto:someone@example.com",
    "ftp://example.com/file",
    "file://example.com/etc/passwd",
])
def test_malformed_or_unsupported_urls_are_invalid(gate, url):
    with pytest.raises(InvalidUrlError) as excinfo:
        gate.authorize(url)
    assert excinfo.value.reason == "InvalidUrl"


def test_denials_share_base_class(gate):
    with pytest.raises(UrlDeniedError):
        gate.authorize("http://evil.com/")
    with pytest.raises(UrlDeniedError):
        gate.authorize("nope")


@pytest.mark.parametrize("url,expected", [
    ("http://example.com/page?next=http://evil.com", "http://example.com/page"),
    ("http://example.com/page%3Fnext=http://evil.com", "http://example.com/page"),
    ("http://example.com/a%3Fb?c", "http://example.com/a"),
    ("http://example.com/a?b%3Fc", "http://example.com/a"),
    ("http://example.com?x=1", "http://example.com"),
    ("http://example.com/plain", "http://example.com/plain"),
])
def test_query_suffix_is_truncated(gate, url, expected):
    assert gate.authorize(url).url == expected


def test_truncation_cannot_move_to_another_host(gate):
    # Before truncation the host is example.com (evil.com%3F is userinfo);
    # after it the URL would point at evil.com.
    with pytest.raises(DomainNotAllowedError):
        gate.authorize("http://evil.com%3F@example.com/")


def test_lowercase_escape_is_not_a_delimiter(gate):
    assert gate.authorize("http://example.com/a%3fb").url == "http://example.com/a%3fb"


@pytest.mark.parametrize("url,expected", [
    ("abc", "abc"),
    ("a?b?c", "a"),
    ("a%3Fb", "a"),
    ("?", ""),
    ("", ""),
])
def test_strip_query_suffix(url, expected):
    assert strip_query_suffix(url) == expected


def test_strip_query_suffix_is_deterministic():
    url = "http://example.com/x%3Fy?z"
    assert strip_query_suffix(url) == strip_query_suffix(strip_query_suffix(url)) == "http://example.com/x"


def test_parse_hostname_custom_schemes():
    assert parse_hostname("ftp://files.example.com/x", allowed_schemes=("ftp",)) == "files.example.com"
    with pytest.raises(InvalidUrlError):
        parse_hostname("http://example.com/", allowed_schemes=("https",))


def test_is_allowed(gate):
    assert gate.is_allowed("example.com")
    assert not gate.is_allowed("evil.com")
    assert not UrlGate([]).is_allowed("example.com")
