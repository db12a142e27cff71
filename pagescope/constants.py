"""Centralized constants for pagescope.

Enums and limits shared by the proxy, the monitoring protocol and the
session manager.
"""

from enum import Enum

MAX_REDIRECTS = 10
FETCH_TIMEOUT_SECONDS = 15.0
NAVIGATION_TIMEOUT_SECONDS = 30.0
SESSION_TIMEOUT_SECONDS = 30 * 60
REAPER_INTERVAL_SECONDS = 60.0

BODY_LIMIT = 5000
PAYLOAD_LIMIT = 1000
DOM_MAX_DEPTH = 10

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
DEFAULT_ACCEPT_LANGUAGE = "en-US,en;q=0.5"

DEFAULT_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]


class ConsoleLevel(str, Enum):
    """Console record levels."""

    LOG = "log"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    DEBUG = "debug"

    @classmethod
    def from_string(cls, value: str | None) -> "ConsoleLevel":
        """Map a page or Playwright console type onto a level, defaulting to LOG."""
        if not value:
            return cls.LOG
        raw = value.strip().lower()
        if raw == "warning":
            return cls.WARN
        try:
            return cls(raw)
        except ValueError:
            return cls.LOG

    def __str__(self) -> str:
        return self.value


class NetworkState(str, Enum):
    """Lifecycle of a network record."""

    PENDING = "pending"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not NetworkState.PENDING

    def __str__(self) -> str:
        return self.value


class MessageType(str, Enum):
    """Message kinds posted by the injected monitoring script."""

    CONSOLE = "console"
    NETWORK = "network"
    INJECTED = "injected"
    DOMREADY = "domready"


class NetworkAction(str, Enum):
    START = "start"
    COMPLETE = "complete"
    ERROR = "error"
