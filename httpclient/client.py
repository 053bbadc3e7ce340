import time
from concurrent.futures import Future, InvalidStateError
from typing import Callable, Optional

from .classify import classify
from .metrics import OutcomeMetrics
from .types import Request, Response, Result, Transport


class TransportClient:
    """Client that runs requests through a transport and classifies the outcome.

    The transport is injected: production code passes a ``Urllib3Transport``,
    tests pass an ``InterceptingTransport``.
    """

    def __init__(self, transport: Transport, metrics: Optional[OutcomeMetrics] = None):
        self.transport = transport
        self.metrics = metrics
        self._closed = False

    def submit(self, request: Request) -> "Future[Result]":
        """Start ``request`` and return a future resolved once with its ``Result``.

        An exception raised by the transport while starting the call (for
        example a harness observer failing an assertion) propagates to the
        caller; use ``perform`` to be notified even in that case.
        """
        future = self._new_future()
        self._dispatch(request, future)
        return future

    def perform(self, request: Request, completion: Callable[[Result], None]) -> None:
        future = self._new_future()
        future.add_done_callback(lambda f: completion(f.result()))
        self._dispatch(request, future)

    def _new_future(self) -> "Future[Result]":
        if self._closed:
            raise RuntimeError("Client is closed")
        future: "Future[Result]" = Future()
        future.set_running_or_notify_cancel()
        return future

    def _dispatch(self, request: Request, future: "Future[Result]") -> None:
        t0 = time.perf_counter()

        def on_raw(data: Optional[bytes], response: Optional[Response], error: Optional[Exception]) -> None:
            result = classify(data, response, error)
            try:
                future.set_result(result)
            except InvalidStateError as exc:
                raise InvalidStateError(
                    f"Transport reported twice for {request.method} {request.url}"
                ) from exc
            if self.metrics is not None:
                self.metrics.record(result, (time.perf_counter() - t0) * 1000.0)

        self.transport.perform_raw(request, on_raw)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "TransportClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
