"""
Validates and authorizes render targets.

`UrlGate.authorize()` is the only way a caller-supplied string reaches the
renderer. It rejects malformed input, refuses every hostname outside the
allowlist, and returns the URL truncated at its first query delimiter.
"""
import re
from typing import Iterable

from pydantic import AnyUrl, BaseModel, ConfigDict, TypeAdapter, ValidationError

from render_proxy.core.exceptions import DomainNotAllowedError, InvalidUrlError

# Characters permitted anywhere in an RFC 3986 URI.
_ILLEGAL_CHARS = re.compile(r"[^a-z0-9:/?#\[\]@!$&'()*+,;=.\-_~%]", re.IGNORECASE)
_BAD_ESCAPE = re.compile(r"%[^0-9a-f]|%[0-9a-f](?:[^0-9a-f]|$)", re.IGNORECASE)
_SCHEME_AUTHORITY = re.compile(r"^[a-z][a-z0-9+.\-]*://[^/?#]+", re.IGNORECASE)

_url_adapter = TypeAdapter(AnyUrl)

# A second URL appended after one of these is never fetched. Legitimate query
# strings on the target are dropped as well.
QUERY_DELIMITERS = ("?", "%3F")


class AuthorizedUrl(BaseModel):
    """A URL that passed the gate; `url` is exactly what the renderer will visit."""
    model_config = ConfigDict(frozen=True)

    url: str
    hostname: str


def strip_query_suffix(url: str) -> str:
    """Truncates `url` at the first literal '?' or '%3F'."""
    cut = len(url)
    for delimiter in QUERY_DELIMITERS:
        index = url.find(delimiter)
        if index != -1 and index < cut:
            cut = index
    return url[:cut]


def parse_hostname(url: str, allowed_schemes: Iterable[str] = ("http", "https")) -> str:
    """
    Checks that `url` is a well-formed absolute URL and returns its hostname.

    Args:
        url (str): Candidate URL.
        allowed_schemes (Iterable[str]): Lower-case schemes accepted.

    Returns:
        str: The lower-cased hostname.

    Raises:
        InvalidUrlError: If the URL is empty, contains characters or escapes not
            allowed in a URI, has no `scheme://authority` prefix, fails to parse,
            uses a scheme outside `allowed_schemes`, or has no host.
    """
    if not url or not url.strip():
        raise InvalidUrlError("URL is empty.", url=url)
    if _ILLEGAL_CHARS.search(url):
        raise InvalidUrlError("URL contains characters not allowed in a URI.", url=url)
    if _BAD_ESCAPE.search(url):
        raise InvalidUrlError("URL contains a malformed percent escape.", url=url)
    if not _SCHEME_AUTHORITY.match(url):
        raise InvalidUrlError("URL is not absolute (scheme://host required).", url=url)

    try:
        parsed = _url_adapter.validate_python(url)
    except ValidationError as e:
        raise InvalidUrlError(f"URL could not be parsed: {e.errors()[0]['msg']}", url=url)

    if parsed.scheme.lower() not in set(allowed_schemes):
        raise InvalidUrlError(f"Scheme '{parsed.scheme}' is not allowed.", url=url)
    if not parsed.host:
        raise InvalidUrlError("URL has no host.", url=url)
    return parsed.host.lower()


class UrlGate:
    """
    Authorizes URLs against a fixed hostname allowlist.

    The gate holds no mutable state; one instance can serve any number of
    concurrent requests.

    Attributes:
        allowed_domains (FrozenSet[str]): Exact hostnames that may be rendered.
        allowed_schemes (Tuple[str, ...]): URL schemes that may be rendered.
    """
    def __init__(self, allowed_domains: Iterable[str], allowed_schemes: Iterable[str] = ("http", "https")):
        self.allowed_domains = frozenset(d.strip().lower() for d in allowed_domains if d and d.strip())
        self.allowed_schemes = tuple(s.lower() for s in allowed_schemes)

    def is_allowed(self, hostname: str) -> bool:
        return bool(self.allowed_domains) and hostname in self.allowed_domains

    def _check(self, url: str) -> str:
        hostname = parse_hostname(url, self.allowed_schemes)
        if not self.is_allowed(hostname):
            raise DomainNotAllowedError(f"Host '{hostname}' is not in the allowlist.", url=url)
        return hostname

    def authorize(self, raw_url: str) -> AuthorizedUrl:
        """
        Validates `raw_url` and returns the URL to render.

        The truncated URL is validated again, so truncation can never move the
        request to a host that was not authorized.

        Raises:
            DomainNotAllowedError: If the allowlist is empty or the host is not listed.
            InvalidUrlError: If the URL is malformed.
        """
        if not self.allowed_domains:
            raise DomainNotAllowedError("No domains are allowed.", url=raw_url)

        hostname = self._check(raw_url)
        target = strip_query_suffix(raw_url)
        if target != raw_url:
            hostname = self._check(target)
        return AuthorizedUrl(url=target, hostname=hostname)
