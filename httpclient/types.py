from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Protocol, Tuple, Union


@dataclass(frozen=True)
class Request:
    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None


@dataclass(frozen=True)
class Response:
    """Response metadata without a status code (file, data or other non-HTTP loads)."""

    url: str
    mime_type: Optional[str] = None
    expected_content_length: int = -1


@dataclass(frozen=True)
class HTTPResponse(Response):
    status_code: int = 200
    headers: Mapping[str, str] = field(default_factory=dict)


RawOutcome = Tuple[Optional[bytes], Optional[Response], Optional[Exception]]


@dataclass(frozen=True)
class Success:
    data: bytes
    response: HTTPResponse


@dataclass(frozen=True)
class Failure:
    error: Exception


Result = Union[Success, Failure]

RawCallback = Callable[[Optional[bytes], Optional[Response], Optional[Exception]], None]


class Transport(Protocol):
    def perform_raw(self, request: Request, callback: RawCallback) -> None: ...


class HTTPClientProtocol(Protocol):
    def perform(self, request: Request, completion: Callable[[Result], None]) -> None: ...
