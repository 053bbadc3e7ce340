import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from .types import RawCallback, Request, Response, Transport


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stub:
    data: Optional[bytes] = None
    response: Optional[Response] = None
    error: Optional[Exception] = None


class InterceptingTransport:
    """Test transport that answers every call from a configured stub.

    Pass it to the client in place of a real transport, then wrap the test in
    ``install()``/``uninstall()`` (or ``with transport.intercepting():``).
    While installed no call reaches a network. Each intercepted call finishes
    exactly once, synchronously, either through the observer or through the
    stub; with an observer set the issuer receives the empty outcome.
    """

    def __init__(self, fallback: Optional[Transport] = None):
        self.fallback = fallback
        self.requests: List[Request] = []
        self._installed = False
        self._stub: Optional[Stub] = None
        self._observer: Optional[Callable[[Request], None]] = None

    @property
    def installed(self) -> bool:
        return self._installed

    def install(self) -> None:
        if self._installed:
            return
        self._reset()
        self._installed = True
        logger.debug("Intercepting requests")

    def uninstall(self) -> None:
        self._installed = False
        self._reset()
        logger.debug("Stopped intercepting requests")

    @contextmanager
    def intercepting(self) -> Iterator["InterceptingTransport"]:
        self.install()
        try:
            yield self
        finally:
            self.uninstall()

    def stub(
        self,
        data: Optional[bytes] = None,
        response: Optional[Response] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self._stub = Stub(data=data, response=response, error=error)

    def observe_requests(self, observer: Callable[[Request], None]) -> None:
        self._observer = observer

    def perform_raw(self, request: Request, callback: RawCallback) -> None:
        if not self._installed:
            if self.fallback is None:
                raise RuntimeError("InterceptingTransport is not installed. Call install() first.")
            self.fallback.perform_raw(request, callback)
            return
        self.requests.append(request)
        observer = self._observer
        if observer is not None:
            logger.debug("Observed %s %s", request.method, request.url)
            try:
                observer(request)
            finally:
                callback(None, None, None)
            return
        stub = self._stub or Stub()
        callback(stub.data, stub.response, stub.error)

    def _reset(self) -> None:
        self._stub = None
        self._observer = None
        self.requests.clear()
