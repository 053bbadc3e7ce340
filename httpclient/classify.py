from typing import Optional

from .errors import UnexpectedRepresentationError
from .types import Failure, HTTPResponse, Response, Result, Success


def _describe(data: Optional[bytes], response: Optional[Response]) -> str:
    data_part = "present" if data is not None else "absent"
    response_part = type(response).__name__ if response is not None else "absent"
    return f"data={data_part}, response={response_part}"


def classify(
    data: Optional[bytes],
    response: Optional[Response],
    error: Optional[Exception],
) -> Result:
    """Turn one transport call's raw outcome into a ``Success`` or ``Failure``.

    An explicit error always wins. Otherwise the only successful shape is data
    together with HTTP response metadata; every other combination, including
    a non-HTTP response, becomes ``UnexpectedRepresentationError``. Neither the
    payload nor the status code is inspected.
    """
    if error is not None:
        return Failure(error)
    if data is not None and isinstance(response, HTTPResponse):
        return Success(data, response)
    return Failure(UnexpectedRepresentationError(_describe(data, response)))
