"""Host-side model of the monitoring script's message vocabulary.

Raw message dicts (as posted by the injected script) are parsed into a closed
set of frozen dataclasses. ``PageMonitor`` applies them in arrival order and
keeps the console and network records of one page instance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from ..constants import ConsoleLevel, MessageType, NetworkAction
from ..records import ConsoleRecord, NetworkRecord, now_ms, truncate_body, truncate_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConsoleMessage:
    level: ConsoleLevel
    data: tuple[str, ...]
    timestamp: int

    @property
    def text(self) -> str:
        return " ".join(self.data)


@dataclass(frozen=True)
class NetworkStart:
    id: str
    method: str
    url: str
    timestamp: int
    payload: Optional[str] = None


@dataclass(frozen=True)
class NetworkComplete:
    id: str
    status: Optional[int]
    status_text: str = ""
    duration: Optional[int] = None
    size: Optional[int] = None
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""


@dataclass(frozen=True)
class NetworkFailure:
    id: str
    error: str


@dataclass(frozen=True)
class Injected:
    pass


@dataclass(frozen=True)
class DomReady:
    pass


Message = Union[ConsoleMessage, NetworkStart, NetworkComplete, NetworkFailure, Injected, DomReady]


def _opt_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_network(data: dict) -> Optional[Message]:
    request_id = data.get("id")
    if not isinstance(request_id, str) or not request_id:
        return None
    try:
        action = NetworkAction(data.get("action"))
    except ValueError:
        return None

    if action is NetworkAction.START:
        payload = data.get("payload")
        return NetworkStart(
            id=request_id,
            method=str(data.get("method") or "GET").upper(),
            url=str(data.get("url") or ""),
            timestamp=_opt_int(data.get("timestamp")) or now_ms(),
            payload=truncate_payload(payload if isinstance(payload, str) else None),
        )
    if action is NetworkAction.COMPLETE:
        headers = data.get("headers")
        return NetworkComplete(
            id=request_id,
            status=_opt_int(data.get("status")),
            status_text=str(data.get("statusText") or ""),
            duration=_opt_int(data.get("duration")),
            size=_opt_int(data.get("size")),
            headers={str(k): str(v) for k, v in headers.items()} if isinstance(headers, dict) else {},
            body=truncate_body(data.get("body") if isinstance(data.get("body"), str) else ""),
        )
    return NetworkFailure(id=request_id, error=str(data.get("error") or "Request failed"))


def parse_message(data: Any) -> Optional[Message]:
    """Parse a raw posted message; returns None for anything outside the vocabulary."""
    if not isinstance(data, dict):
        return None
    try:
        kind = MessageType(data.get("type"))
    except ValueError:
        return None

    if kind is MessageType.CONSOLE:
        raw = data.get("data")
        items = raw if isinstance(raw, list) else []
        return ConsoleMessage(
            level=ConsoleLevel.from_string(data.get("level")),
            data=tuple(str(item) for item in items),
            timestamp=_opt_int(data.get("timestamp")) or now_ms(),
        )
    if kind is MessageType.NETWORK:
        return _parse_network(data)
    if kind is MessageType.INJECTED:
        return Injected()
    return DomReady()


Listener = Callable[[Message], None]


class PageMonitor:
    """Observer for the message stream of one page instance."""

    def __init__(self):
        self.console: list[ConsoleRecord] = []
        self._network: dict[str, NetworkRecord] = {}
        self.injected = False
        self.dom_ready = False
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    @property
    def network(self) -> list[NetworkRecord]:
        return list(self._network.values())

    def feed(self, data: Any) -> bool:
        """Parse and apply a raw message dict."""
        message = parse_message(data)
        if message is None:
            return False
        return self.handle(message)

    def handle(self, message: Message) -> bool:
        """Apply a message; returns False when it was ignored."""
        if isinstance(message, Injected):
            if self.injected:
                return False
            self.injected = True
        elif not self.injected:
            logger.debug("Ignoring %s before injection", type(message).__name__)
            return False
        elif isinstance(message, ConsoleMessage):
            self.console.append(ConsoleRecord(level=message.level, message=message.text, timestamp=message.timestamp))
        elif isinstance(message, NetworkStart):
            if message.id in self._network:
                return False
            self._network[message.id] = NetworkRecord(
                id=message.id,
                method=message.method,
                url=message.url,
                timestamp=message.timestamp,
                payload=message.payload,
            )
        elif isinstance(message, NetworkComplete):
            record = self._network.get(message.id)
            if record is None or not record.complete(
                status=message.status,
                status_text=message.status_text,
                duration=message.duration,
                size=message.size,
                headers=message.headers,
                body=message.body,
            ):
                return False
        elif isinstance(message, NetworkFailure):
            record = self._network.get(message.id)
            if record is None or not record.fail(message.error):
                return False
        elif isinstance(message, DomReady):
            if self.dom_ready:
                return False
            self.dom_ready = True

        for listener in list(self._listeners):
            try:
                listener(message)
            except Exception as exc:
                logger.warning("Page monitor listener failed: %s", exc)
        return True

    def clear(self) -> None:
        self.console.clear()
        self._network.clear()
