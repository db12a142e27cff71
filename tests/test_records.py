from pagescope.constants import ConsoleLevel, NetworkState
from pagescope.records import ConsoleRecord, NetworkRecord, truncate_body, truncate_payload


def test_truncation_limits():
    assert truncate_body("a" * 6000) == "a" * 5000
    assert truncate_body(None) == ""
    assert truncate_payload("b" * 1500) == "b" * 1000
    assert truncate_payload(None) is None
    assert truncate_payload("") == ""


def test_network_record_normalizes_method_and_payload():
    record = NetworkRecord(id="1", method="post", url="https://x/", payload="p" * 1200)

    assert record.method == "POST"
    assert len(record.payload) == 1000
    assert record.pending


def test_complete_computes_duration_when_missing():
    record = NetworkRecord(id="1", method="GET", url="https://x/")
    assert record.complete(status=200, status_text="OK", headers={"a": 1}, body="x" * 7000)

    assert record.state is NetworkState.COMPLETE
    assert record.duration >= 0
    assert record.headers == {"a": "1"}
    assert len(record.body) == 5000


def test_negative_duration_is_clamped():
    record = NetworkRecord(id="1", method="GET", url="https://x/")
    record.complete(status=200, duration=-5)
    assert record.duration == 0


def test_terminal_record_cannot_change():
    record = NetworkRecord(id="1", method="GET", url="https://x/")
    assert record.fail("net::ERR_FAILED")

    assert record.complete(status=200) is False
    assert record.fail("again") is False
    assert record.state is NetworkState.ERROR
    assert record.error == "net::ERR_FAILED"
    assert record.status is None


def test_fail_without_message_uses_generic_error():
    record = NetworkRecord(id="1", method="GET", url="https://x/")
    record.fail(None)
    assert record.error == "Error"


def test_to_dict_shapes():
    console = ConsoleRecord(level=ConsoleLevel.WARN, message="careful", timestamp=1)
    assert console.to_dict() == {"level": "warn", "message": "careful", "timestamp": 1}

    record = NetworkRecord(id="abc", method="GET", url="https://x/", timestamp=10)
    record.complete(status=404, status_text="Not Found", duration=3)
    data = record.to_dict()

    assert data["state"] == "complete"
    assert data["statusText"] == "Not Found"
    assert data["status"] == 404
    assert data["duration"] == 3


def test_truncation_boundaries():
    assert truncate_body("a" * 5000) == "a" * 5000
    assert truncate_body("a" * 5001) == "a" * 5000
    assert truncate_body("short") == "short"
    assert truncate_payload("b" * 1000) == "b" * 1000
    assert truncate_payload("b" * 1001) == "b" * 1000
    assert truncate_payload("short") == "short"
