"""
URL gate component: syntax validation and the hostname allowlist.
"""
from .url_gate import AuthorizedUrl, UrlGate, parse_hostname, strip_query_suffix

__all__ = [
    "AuthorizedUrl",
    "UrlGate",
    "parse_hostname",
    "strip_query_suffix",
]
