from __future__ import annotations

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests

from apiPerfBudget.perf import measure
from apiPerfBudget.perf.measure import MeasureOptions, batch_sizes, measure_route

URL = "http://perf.test/api/users"


def test_measure_route_returns_stats(requests_mock):
    requests_mock.get(URL, json={"ok": True})
    stats = measure_route(URL, requests=10, concurrency=2)
    assert stats.count == 10
    assert requests_mock.call_count == 10
    assert stats.min <= stats.median <= stats.max
    assert stats.p50 <= stats.p75 <= stats.p90 <= stats.p95 <= stats.p99
    assert stats.median == stats.p50


@pytest.mark.parametrize("concurrency", [1, 3, 4, 15, 50])
def test_measure_route_count_independent_of_concurrency(requests_mock, concurrency):
    requests_mock.get(URL, text="ok")
    stats = measure_route(URL, MeasureOptions(requests=15, concurrency=concurrency))
    assert stats.count == 15
    assert requests_mock.call_count == 15


def test_measure_route_sends_body_for_post(requests_mock):
    m = requests_mock.post(URL, status_code=201)
    stats = measure_route(
        URL,
        requests=5,
        concurrency=2,
        method="post",
        headers={"content-type": "application/json"},
        body='{"name": "test"}',
    )
    assert stats.count == 5
    assert stats.p50 >= 0
    assert m.call_count == 5
    assert m.last_request.method == "POST"
    assert m.last_request.text == '{"name": "test"}'
    assert m.last_request.headers["content-type"] == "application/json"


@pytest.mark.parametrize("method", ["GET", "HEAD", "get"])
def test_measure_route_omits_body_for_bodyless_methods(requests_mock, method):
    m = requests_mock.register_uri(method.upper(), URL, text="")
    measure_route(URL, requests=2, concurrency=2, method=method, body="ignored")
    assert m.call_count == 2
    assert all(req.body is None for req in m.request_history)


def test_measure_route_records_transport_errors_as_timings(requests_mock):
    requests_mock.get(URL, exc=requests.exceptions.ConnectionError)
    stats = measure_route(URL, requests=7, concurrency=3)
    assert stats.count == 7
    assert stats.min >= 0


def test_measure_route_ignores_error_status(requests_mock):
    requests_mock.get(URL, status_code=503)
    assert measure_route(URL, requests=4, concurrency=4).count == 4


def test_measure_route_zero_requests_is_empty(requests_mock):
    stats = measure_route(URL, requests=0)
    assert stats.count == 0
    assert stats.p99 == 0
    assert requests_mock.call_count == 0


@pytest.mark.parametrize("overrides", [{"requests": -1}, {"concurrency": 0}])
def test_measure_route_rejects_invalid_options(overrides):
    with pytest.raises(ValueError):
        measure_route(URL, **overrides)


def test_batch_sizes():
    assert batch_sizes(15, 4) == [4, 4, 4, 3]
    assert batch_sizes(10, 10) == [10]
    assert batch_sizes(3, 10) == [3]
    assert batch_sizes(0, 5) == []


def test_batches_never_exceed_concurrency(monkeypatch):
    lock = threading.Lock()
    in_flight = 0
    peak = 0

    def fake_request(session, url, options):
        nonlocal in_flight, peak
        with lock:
            in_flight += 1
            peak = max(peak, in_flight)
        time.sleep(0.01)
        with lock:
            in_flight -= 1
        return measure._Timing(1.0)

    monkeypatch.setattr(measure, "_measure_single_request", fake_request)
    stats = measure_route(URL, requests=13, concurrency=4)
    assert stats.count == 13
    assert 1 <= peak <= 4
    assert stats.p50 == 1.0


class _OkHandler(BaseHTTPRequestHandler):
    def _reply(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        if length:
            self.rfile.read(length)
        payload = b'{"ok": true}'
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    do_GET = _reply
    do_POST = _reply

    def log_message(self, format, *args):  # noqa: A002 - stdlib signature
        pass


@pytest.fixture
def local_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _OkHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


@pytest.mark.enable_socket
def test_measure_route_against_local_server(local_server):
    stats = measure_route(local_server, requests=20, concurrency=5)
    assert stats.count == 20
    assert 0 < stats.min <= stats.p50 <= stats.p99 <= stats.max


@pytest.mark.enable_socket
def test_measure_route_unreachable_endpoint_still_completes():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _OkHandler)
    port = server.server_address[1]
    server.server_close()
    stats = measure_route(f"http://127.0.0.1:{port}", requests=6, concurrency=3, timeout_s=2)
    assert stats.count == 6


@pytest.mark.parametrize("error", [UnicodeEncodeError, OSError, ValueError])
def test_measure_route_records_non_transport_errors_as_timings(monkeypatch, error):
    def failing_request(self, method, url, **kwargs):
        if error is UnicodeEncodeError:
            raise UnicodeEncodeError("latin-1", "Zoë ✓", 4, 5, "ordinal not in range(256)")
        raise error("request could not be sent")

    monkeypatch.setattr(requests.Session, "request", failing_request)
    stats = measure_route(URL, requests=3, concurrency=2, headers={"X-User": "Zoë ✓"})
    assert stats.count == 3
    assert stats.min >= 0
