"""Error taxonomy for pagescope.

Every error carries the HTTP status the API surface answers with, so the
request handlers can translate failures without a lookup table.
"""

from __future__ import annotations


class PageScopeError(Exception):
    """Base class for all pagescope errors."""

    status: int = 500

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__ or "")
        self.message = str(message or self.__class__.__doc__ or "")


# Proxy path


class FetchError(PageScopeError):
    """Failed to fetch page."""

    status = 502


class InvalidUrlError(FetchError):
    """Invalid URL"""

    status = 400


class ForbiddenHostError(FetchError):
    """Access to local addresses is not allowed"""

    status = 403


class FetchTimeoutError(FetchError):
    """Request timeout"""

    status = 504


class TooManyRedirectsError(FetchError):
    """Too many redirects"""

    status = 502


class TransportError(FetchError):
    """Transport failure, carries the underlying client message verbatim."""

    status = 502


# Session path


class SessionError(PageScopeError):
    """Browser session failure."""

    status = 500


class SessionsDisabledError(SessionError):
    """Browser sessions are not enabled"""

    status = 501


class LaunchError(SessionError):
    """Failed to launch browser"""

    status = 500


class NavigationError(SessionError):
    """Failed to load page"""

    status = 502


class SessionNotFoundError(SessionError):
    """Session not found"""

    status = 404


class ExecutionError(SessionError):
    """Script execution failed"""

    status = 500
