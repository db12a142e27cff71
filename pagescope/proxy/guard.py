"""Outbound address guard for the proxy and browser sessions."""

from __future__ import annotations

from urllib.parse import ParseResult, urlparse

from ..errors import InvalidUrlError

FORBIDDEN_HOSTS = frozenset({"localhost", "127.0.0.1", "0.0.0.0"})
FORBIDDEN_PREFIXES = ("192.168.", "10.", "172.")
ALLOWED_SCHEMES = ("http", "https")


def parse_http_url(url: str | None) -> ParseResult:
    """Parse ``url``, accepting only http(s) URLs with a host."""
    try:
        parsed = urlparse((url or "").strip())
    except ValueError as exc:
        raise InvalidUrlError() from exc
    if parsed.scheme not in ALLOWED_SCHEMES or not parsed.hostname:
        raise InvalidUrlError()
    return parsed


def is_forbidden(hostname: str | None) -> bool:
    """Block loopback and private-looking hosts before any connection is made.

    This is a lexical prefix check, not CIDR arithmetic: ``172.`` covers the
    whole 172.0.0.0/8 range and hostnames are never resolved.
    """
    host = (hostname or "").strip().lower()
    if host in FORBIDDEN_HOSTS:
        return True
    return host.startswith(FORBIDDEN_PREFIXES)
