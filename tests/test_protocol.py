"""Tests for the host-side monitoring protocol."""

from __future__ import annotations

from pagescope.constants import ConsoleLevel, NetworkState
from pagescope.proxy.protocol import (
    ConsoleMessage,
    DomReady,
    Injected,
    NetworkComplete,
    NetworkFailure,
    NetworkStart,
    PageMonitor,
    parse_message,
)


def _injected_monitor() -> PageMonitor:
    monitor = PageMonitor()
    assert monitor.feed({"type": "injected"}) is True
    return monitor


def test_parse_console_message():
    message = parse_message({"type": "console", "level": "warn", "data": ["a", "b"], "timestamp": 5})

    assert isinstance(message, ConsoleMessage)
    assert message.level is ConsoleLevel.WARN
    assert message.text == "a b"
    assert message.timestamp == 5


def test_parse_unknown_level_falls_back_to_log():
    message = parse_message({"type": "console", "level": "trace", "data": []})
    assert message.level is ConsoleLevel.LOG


def test_parse_network_messages():
    start = parse_message(
        {"type": "network", "action": "start", "id": "r1", "method": "post", "url": "https://x/", "payload": "p" * 2000}
    )
    assert isinstance(start, NetworkStart)
    assert start.method == "POST"
    assert len(start.payload) == 1000

    complete = parse_message(
        {
            "type": "network",
            "action": "complete",
            "id": "r1",
            "status": 200,
            "statusText": "OK",
            "duration": 12,
            "size": 9000,
            "headers": {"Content-Type": "text/plain"},
            "body": "b" * 9000,
        }
    )
    assert isinstance(complete, NetworkComplete)
    assert complete.size == 9000
    assert len(complete.body) == 5000

    failure = parse_message({"type": "network", "action": "error", "id": "r1"})
    assert isinstance(failure, NetworkFailure)
    assert failure.error == "Request failed"


def test_parse_rejects_messages_outside_vocabulary():
    assert parse_message("console") is None
    assert parse_message({"type": "bogus"}) is None
    assert parse_message({"type": "network", "action": "start"}) is None
    assert parse_message({"type": "network", "action": "restart", "id": "x"}) is None
    assert isinstance(parse_message({"type": "injected"}), Injected)
    assert isinstance(parse_message({"type": "domready"}), DomReady)


def test_messages_before_injection_are_ignored():
    monitor = PageMonitor()

    assert monitor.feed({"type": "console", "level": "log", "data": ["early"]}) is False
    assert monitor.feed({"type": "domready"}) is False
    assert monitor.console == []
    assert monitor.dom_ready is False


def test_injected_and_domready_are_one_shot():
    monitor = _injected_monitor()

    assert monitor.feed({"type": "injected"}) is False
    assert monitor.feed({"type": "domready"}) is True
    assert monitor.feed({"type": "domready"}) is False
    assert monitor.dom_ready is True


def test_console_records_keep_arrival_order():
    monitor = _injected_monitor()
    monitor.feed({"type": "console", "level": "log", "data": ["one"], "timestamp": 2})
    monitor.feed({"type": "console", "level": "error", "data": ["two"], "timestamp": 1})

    assert [r.message for r in monitor.console] == ["one", "two"]
    assert monitor.console[1].level is ConsoleLevel.ERROR


def test_network_record_lifecycle():
    monitor = _injected_monitor()
    monitor.feed({"type": "network", "action": "start", "id": "r1", "method": "GET", "url": "https://x/a", "timestamp": 100})

    [record] = monitor.network
    assert record.state is NetworkState.PENDING

    assert monitor.feed({"type": "network", "action": "complete", "id": "r1", "status": 201, "statusText": "Created", "duration": 7})
    assert record.state is NetworkState.COMPLETE
    assert record.status == 201
    assert record.duration == 7

    # Terminal records are not touched again.
    assert monitor.feed({"type": "network", "action": "error", "id": "r1", "error": "late"}) is False
    assert record.state is NetworkState.COMPLETE
    assert record.error is None


def test_network_failure_and_unknown_ids():
    monitor = _injected_monitor()
    monitor.feed({"type": "network", "action": "start", "id": "r1", "url": "https://x/"})

    assert monitor.feed({"type": "network", "action": "complete", "id": "nope", "status": 200}) is False
    assert monitor.feed({"type": "network", "action": "error", "id": "r1", "error": "Failed to fetch"}) is True

    [record] = monitor.network
    assert record.state is NetworkState.ERROR
    assert record.error == "Failed to fetch"
    assert record.duration >= 0


def test_duplicate_start_is_ignored():
    monitor = _injected_monitor()
    monitor.feed({"type": "network", "action": "start", "id": "r1", "url": "https://x/1"})
    assert monitor.feed({"type": "network", "action": "start", "id": "r1", "url": "https://x/2"}) is False
    assert [r.url for r in monitor.network] == ["https://x/1"]


def test_listeners_see_applied_messages_only():
    monitor = PageMonitor()
    seen = []
    monitor.subscribe(seen.append)

    monitor.feed({"type": "console", "level": "log", "data": ["early"]})
    monitor.feed({"type": "injected"})
    monitor.feed({"type": "console", "level": "log", "data": ["late"]})

    assert [type(m).__name__ for m in seen] == ["Injected", "ConsoleMessage"]


def test_failing_listener_does_not_break_monitor():
    monitor = PageMonitor()

    def boom(message):
        raise RuntimeError("listener failed")

    monitor.subscribe(boom)
    assert monitor.feed({"type": "injected"}) is True
    assert monitor.injected is True


def test_clear_keeps_injection_state():
    monitor = _injected_monitor()
    monitor.feed({"type": "console", "level": "log", "data": ["x"]})
    monitor.clear()

    assert monitor.console == []
    assert monitor.network == []
    assert monitor.injected is True
