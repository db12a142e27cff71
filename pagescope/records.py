"""Console and network records shared by the page monitor and browser sessions."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

from .constants import BODY_LIMIT, PAYLOAD_LIMIT, ConsoleLevel, NetworkState


def now_ms() -> int:
    return int(time.time() * 1000)


def truncate_body(body: Optional[str]) -> str:
    """Cap a response body at BODY_LIMIT characters."""
    if not body:
        return ""
    return body[:BODY_LIMIT]


def truncate_payload(payload: Optional[str]) -> Optional[str]:
    """Cap a request payload at PAYLOAD_LIMIT characters; None stays None."""
    if payload is None:
        return None
    return payload[:PAYLOAD_LIMIT]


@dataclass
class ConsoleRecord:
    """A single console message observed on a page."""

    level: ConsoleLevel
    message: str
    timestamp: int = field(default_factory=now_ms)

    def to_dict(self) -> dict:
        return {
            "level": str(self.level),
            "message": self.message,
            "timestamp": self.timestamp,
        }


@dataclass
class NetworkRecord:
    """Lifecycle record of one HTTP request made by a page.

    A record leaves ``pending`` exactly once. ``complete()`` and ``fail()``
    return False and change nothing when the record is already terminal.
    """

    id: str
    method: str
    url: str
    timestamp: int = field(default_factory=now_ms)
    state: NetworkState = NetworkState.PENDING
    status: Optional[int] = None
    status_text: str = ""
    duration: Optional[int] = None
    size: Optional[int] = None
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    payload: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self):
        self.method = (self.method or "GET").upper()
        self.payload = truncate_payload(self.payload)

    @property
    def pending(self) -> bool:
        return self.state is NetworkState.PENDING

    def complete(
        self,
        *,
        status: Optional[int],
        status_text: str = "",
        duration: Optional[int] = None,
        size: Optional[int] = None,
        headers: Optional[dict] = None,
        body: Optional[str] = None,
    ) -> bool:
        if not self.pending:
            return False
        self.state = NetworkState.COMPLETE
        self.status = status
        self.status_text = status_text or ""
        if duration is None:
            duration = now_ms() - self.timestamp
        self.duration = max(0, int(duration))
        self.size = size
        self.headers = {str(k): str(v) for k, v in (headers or {}).items()}
        self.body = truncate_body(body)
        return True

    def fail(self, error: Optional[str], *, duration: Optional[int] = None) -> bool:
        if not self.pending:
            return False
        self.state = NetworkState.ERROR
        self.error = error or "Error"
        self.status_text = self.error
        if duration is None:
            duration = now_ms() - self.timestamp
        self.duration = max(0, int(duration))
        return True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "method": self.method,
            "url": self.url,
            "timestamp": self.timestamp,
            "state": str(self.state),
            "status": self.status,
            "statusText": self.status_text,
            "duration": self.duration,
            "size": self.size,
            "headers": dict(self.headers),
            "body": self.body,
            "payload": self.payload,
            "error": self.error,
        }
