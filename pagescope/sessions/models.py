"""Browser session data models."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

from playwright.async_api import Browser, Page

from ..records import ConsoleRecord, NetworkRecord


@dataclass
class BrowserSession:
    """A supervised headless browser; owns its browser process and page."""

    session_id: str
    url: str
    browser: Browser
    page: Page
    created_at: float = field(default_factory=time.time)
    console_logs: list[ConsoleRecord] = field(default_factory=list)
    network_log: list[NetworkRecord] = field(default_factory=list)

    def age(self, now: Optional[float] = None) -> float:
        return (time.time() if now is None else now) - self.created_at

    def is_expired(self, timeout: float, now: Optional[float] = None) -> bool:
        return self.age(now) > timeout

    def snapshot_logs(self) -> tuple[list[ConsoleRecord], list[NetworkRecord]]:
        return list(self.console_logs), list(self.network_log)


@dataclass
class SessionSnapshot:
    """What a caller gets back from starting a session."""

    session_id: str
    screenshot: bytes
    console_logs: list[ConsoleRecord]
    network_log: list[NetworkRecord]
    html: str
