from datetime import datetime, timedelta, timezone

import pytest
import requests

from eatc_airlines.fetch import FeedClient, FeedError, FeedPage, fetch_history, parse_record
from eatc_airlines.model import Bound

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


def _record(**overrides):
    record = {
        "fid": 101,
        "arrau": 1704880800,
        "acr": "G-EUUA",
        "act": "A320",
        "csalic": "BAW",
        "cs": "BAW12",
        "apdstic": "EGLL",
        "apdstla": 51.47,
        "apdstlo": -0.4543,
        "aporgic": "EDDF",
        "aporgla": 50.03,
        "aporglo": 8.57,
    }
    record.update(overrides)
    return record


def test_parse_record_builds_arrival():
    flight = parse_record(_record(), "EGLL")
    assert flight.id == 101
    assert flight.time == datetime(2024, 1, 10, 10, 0, tzinfo=timezone.utc)
    assert flight.airline.code == "BAW"
    assert flight.destination.name == "EGLL"
    assert flight.bound is Bound.ARRIVAL


def test_parse_record_falls_back_through_fields():
    flight = parse_record(_record(arrau=None, arreu=1704880900, cs=None, fnic="BA12"), "EDDF")
    assert flight.time.minute == 1
    assert flight.callsign == "BA12"
    assert flight.bound is Bound.DEPARTURE


@pytest.mark.parametrize(
    "overrides",
    [
        {"act": "GRND"},
        {"aporgic": "EGLL"},
        {"arrau": None},
        {"fid": "101"},
        {"acr": 5},
        {"apdstla": None},
    ],
)
def test_parse_record_skips_unusable(overrides):
    assert parse_record(_record(**overrides), "EGLL") is None


class FakeResponse:
    def __init__(self, body=None, status=200):
        self._body = body
        self.status_code = status
        self.ok = status < 400
        self.reason = "OK" if self.ok else "Forbidden"
        self.url = "https://feed.example/EGLL"

    def json(self):
        if self._body is None:
            raise ValueError("no JSON")
        return self._body


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        return self.response

    def close(self):
        self.closed = True


def _client(response):
    client = FeedClient("https://feed.example", "secret", timeout=5)
    client.session = FakeSession(response)
    return client


def test_get_page_parses_body():
    body = {"list": [_record(), _record(fid=102, arrau=1704877200), "junk", {"fid": 3}], "hasEarlier": True}
    client = _client(FakeResponse(body))

    page = client.get_page("EGLL", NOW)

    assert [f.id for f in page.flights] == [101, 102]
    assert page.more is True
    assert page.oldest == datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)
    url, params, timeout = client.session.calls[0]
    assert url == "https://feed.example/EGLL"
    assert params == {"key": "secret", "max": str(int(NOW.timestamp()))}
    assert timeout == 5


def test_get_page_errors():
    with pytest.raises(FeedError, match="403"):
        _client(FakeResponse({}, status=403)).get_page("EGLL", NOW)
    with pytest.raises(FeedError, match="failed to parse"):
        _client(FakeResponse(None)).get_page("EGLL", NOW)
    with pytest.raises(FeedError, match="failed to parse"):
        _client(FakeResponse({"list": []})).get_page("EGLL", NOW)


class FakeClient:
    """Serves one flight per window until ``limit`` is passed, optionally failing."""

    def __init__(self, limit, fail_before=None):
        self.limit = limit
        self.fail_before = fail_before
        self.requested = []

    def get_page(self, icao, before):
        self.requested.append(before)
        if self.fail_before is not None and before < self.fail_before:
            raise requests.ConnectionError("connection reset")
        stamp = min(before, NOW) - timedelta(minutes=1)
        flight = parse_record(_record(fid=int(stamp.timestamp()), arrau=stamp.timestamp()), icao)
        return FeedPage(flights=[flight], more=stamp > self.limit, oldest=stamp)


def test_fetch_history_walks_back_until_no_more():
    client = FakeClient(limit=NOW - timedelta(hours=6))
    flights = fetch_history(client, "EGLL", concurrency=3, step=timedelta(hours=1), now=NOW)

    assert client.requested[0] == NOW + timedelta(days=1)
    first_round = [NOW - timedelta(minutes=1) + timedelta(hours=1) - timedelta(hours=i) for i in range(3)]
    assert sorted(client.requested[1:4], reverse=True) == first_round
    assert min(f.time for f in flights.values()) <= NOW - timedelta(hours=6)


def test_fetch_history_keeps_flights_after_failure(caplog):
    client = FakeClient(limit=NOW - timedelta(days=5), fail_before=NOW - timedelta(hours=2))
    flights = fetch_history(client, "EGLL", concurrency=2, step=timedelta(hours=1), now=NOW)

    assert flights
    assert "connection reset" in caplog.text


def test_fetch_history_initial_failure_returns_nothing():
    client = FakeClient(limit=NOW, fail_before=NOW + timedelta(days=2))
    assert fetch_history(client, "EGLL", now=NOW) == {}


def test_fetch_history_rejects_bad_concurrency():
    with pytest.raises(ValueError):
        fetch_history(FakeClient(limit=NOW), "EGLL", concurrency=0, now=NOW)


def test_client_closes_session_on_exit():
    client = _client(FakeResponse({"list": [], "hasEarlier": False}))
    with client as opened:
        assert opened.get_page("EGLL", NOW).flights == []
    assert client.session.closed
