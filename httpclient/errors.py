"""
Error values delivered through ``Failure`` results.
"""


class HTTPClientError(Exception):
    """Base exception for errors synthesized by this package."""

    pass


class TransportError(HTTPClientError):
    """
    Network-level failure reported by a transport.

    Raised when a connection is refused, times out or breaks. The underlying
    library exception, if any, is kept as ``__cause__``.
    """

    pass


class UnexpectedRepresentationError(HTTPClientError):
    """
    The transport returned neither an error nor data with an HTTP response.

    ``shape`` describes what did arrive, e.g. ``"data=absent, response=absent"``.
    Two instances describing the same shape compare equal.
    """

    def __init__(self, shape: str):
        super().__init__(f"Unexpected values representation ({shape})")
        self.shape = shape

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnexpectedRepresentationError):
            return NotImplemented
        return self.shape == other.shape

    def __hash__(self) -> int:
        return hash((UnexpectedRepresentationError, self.shape))

    def __repr__(self) -> str:
        return f"UnexpectedRepresentationError(shape={self.shape!r})"
