import threading
from concurrent.futures import InvalidStateError

import pytest

from httpclient.client import TransportClient
from httpclient.errors import TransportError, UnexpectedRepresentationError
from httpclient.metrics import OutcomeMetrics
from httpclient.types import Failure, HTTPResponse, Request, Success


class BackgroundTransport:
    """Completes each call from a separate thread, like a real network stack."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.closed = False

    def perform_raw(self, request, callback):
        threading.Thread(target=callback, args=self.outcome).start()

    def close(self):
        self.closed = True


class DoubleReportingTransport:
    def __init__(self):
        self.errors = []

    def perform_raw(self, request, callback):
        callback(b"first", HTTPResponse(url=request.url), None)
        try:
            callback(None, None, TransportError("second"))
        except InvalidStateError as exc:
            self.errors.append(exc)


def test_perform_completes_on_background_thread():
    response = HTTPResponse(url="http://any-url.com", status_code=200)
    client = TransportClient(BackgroundTransport((b"payload", response, None)))
    done = threading.Event()
    received = []

    def completion(result):
        received.append(result)
        done.set()

    client.perform(Request(url="http://any-url.com"), completion)

    assert done.wait(timeout=1.0)
    assert received == [Success(b"payload", response)]


def test_submit_returns_future_with_classified_result():
    client = TransportClient(BackgroundTransport((None, None, None)))

    result = client.submit(Request(url="http://any-url.com")).result(timeout=1.0)

    assert isinstance(result, Failure)
    assert isinstance(result.error, UnexpectedRepresentationError)


def test_second_report_is_rejected():
    transport = DoubleReportingTransport()
    client = TransportClient(transport)

    result = client.submit(Request(url="http://any-url.com")).result(timeout=1.0)

    assert isinstance(result, Success)
    assert result.data == b"first"
    assert len(transport.errors) == 1


def test_second_report_is_not_counted():
    metrics = OutcomeMetrics()
    transport = DoubleReportingTransport()
    client = TransportClient(transport, metrics=metrics)

    client.submit(Request(url="http://any-url.com")).result(timeout=1.0)

    totals, _ = metrics.snapshot()
    assert len(transport.errors) == 1
    assert totals.calls == 1
    assert totals.successes == 1
    assert totals.transport_failures == 0


def test_metrics_count_each_outcome(transport):
    metrics = OutcomeMetrics()
    client = TransportClient(transport, metrics=metrics)

    transport.stub(data=b"1234", response=HTTPResponse(url="http://any-url.com"))
    client.submit(Request(url="http://any-url.com"))
    transport.stub(error=TransportError("refused"))
    client.submit(Request(url="http://any-url.com"))
    transport.stub()
    client.submit(Request(url="http://any-url.com"))

    totals, elapsed = metrics.snapshot()
    assert totals.calls == 3
    assert totals.successes == 1
    assert totals.transport_failures == 1
    assert totals.unexpected_representations == 1
    assert totals.bytes == 4
    assert totals.duration_ms_sum >= 0.0
    assert elapsed > 0


def test_close_closes_transport_and_rejects_new_requests():
    transport = BackgroundTransport((None, None, None))

    with TransportClient(transport) as client:
        pass

    assert transport.closed
    with pytest.raises(RuntimeError):
        client.submit(Request(url="http://any-url.com"))


def test_close_without_transport_close(transport):
    client = TransportClient(transport)
    client.close()
    client.close()
