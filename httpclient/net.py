import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple

import urllib3
from urllib3.util.retry import Retry
from urllib3 import exceptions as urllib3_exc

from .config import ClientConfig
from .errors import TransportError
from .types import HTTPResponse, RawCallback, Request


logger = logging.getLogger(__name__)


class Urllib3Transport:
    def __init__(self, config: Optional[ClientConfig] = None, http: Optional[urllib3.PoolManager] = None):
        self.config = config or ClientConfig()
        self.timeout = urllib3.Timeout(connect=self.config.connect_timeout, read=self.config.read_timeout)
        self.http = http or urllib3.PoolManager(
            maxsize=self.config.max_connections,
            headers={"User-Agent": self.config.user_agent},
            # Only redirects are followed; retrying is left to callers.
            retries=Retry(
                total=None,
                connect=0,
                read=0,
                status=0,
                other=0,
                redirect=self.config.max_redirects,
                raise_on_redirect=False,
                raise_on_status=False,
            ),
        )
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, self.config.workers), thread_name_prefix="httpclient"
        )

    def perform_raw(self, request: Request, callback: RawCallback) -> None:
        self._executor.submit(self._run, request, callback)

    def _run(self, request: Request, callback: RawCallback) -> None:
        try:
            data, metadata = self._fetch(request)
        except urllib3_exc.HTTPError as exc:
            logger.debug("Request failed: %s %s: %s", request.method, request.url, exc)
            error = TransportError(f"{request.method} {request.url} failed: {exc}")
            error.__cause__ = exc
            callback(None, None, error)
            return
        except Exception as exc:
            logger.exception("Unexpected error during %s %s", request.method, request.url)
            callback(None, None, exc)
            return
        callback(data, metadata, None)

    def _fetch(self, request: Request) -> Tuple[bytes, HTTPResponse]:
        headers = {"User-Agent": self.config.user_agent}
        headers.update(request.headers)
        response = self.http.request(
            request.method,
            request.url,
            body=request.body,
            headers=headers,
            timeout=self.timeout,
            preload_content=True,
        )
        metadata = HTTPResponse(
            url=response.url or request.url,
            mime_type=response.headers.get("Content-Type"),
            expected_content_length=_content_length(response.headers.get("Content-Length")),
            status_code=response.status,
            headers=dict(response.headers),
        )
        return response.data or b"", metadata

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        self.http.clear()


def _content_length(value: Optional[str]) -> int:
    if not value:
        return -1
    try:
        length = int(value)
    except ValueError:
        return -1
    return length if length >= 0 else -1
