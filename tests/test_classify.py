import pytest

from httpclient.classify import classify
from httpclient.errors import TransportError, UnexpectedRepresentationError
from httpclient.types import Failure, HTTPResponse, Response, Success


URL = "http://any-url.com"
DATA = b"any data"


def http_response(status: int = 200) -> HTTPResponse:
    return HTTPResponse(url=URL, status_code=status)


def plain_response() -> Response:
    return Response(url=URL, mime_type=None, expected_content_length=0)


@pytest.mark.parametrize("data", [None, DATA])
@pytest.mark.parametrize("response", [None, http_response(), plain_response()], ids=["no-response", "http", "non-http"])
def test_error_always_wins(data, response):
    error = TransportError("refused")
    result = classify(data, response, error)
    assert isinstance(result, Failure)
    assert result.error is error


def test_data_with_http_response_succeeds():
    response = http_response()
    result = classify(DATA, response, None)
    assert isinstance(result, Success)
    assert result.data is DATA
    assert result.response is response


@pytest.mark.parametrize("status", [100, 204, 304, 404, 500, 599])
def test_status_code_is_not_inspected(status):
    result = classify(DATA, http_response(status), None)
    assert isinstance(result, Success)
    assert result.response.status_code == status


def test_empty_data_counts_as_present():
    result = classify(b"", http_response(), None)
    assert result == Success(b"", http_response())


@pytest.mark.parametrize(
    "data,response,shape",
    [
        (None, None, "data=absent, response=absent"),
        (DATA, None, "data=present, response=absent"),
        (None, http_response(), "data=absent, response=HTTPResponse"),
        (None, plain_response(), "data=absent, response=Response"),
        (DATA, plain_response(), "data=present, response=Response"),
    ],
)
def test_other_shapes_are_unexpected(data, response, shape):
    result = classify(data, response, None)
    assert isinstance(result, Failure)
    assert isinstance(result.error, UnexpectedRepresentationError)
    assert result.error.shape == shape


def test_classify_is_deterministic():
    assert classify(None, None, None) == classify(None, None, None)
    assert classify(DATA, http_response(), None) == classify(DATA, http_response(), None)
    assert classify(DATA, plain_response(), None) != classify(None, None, None)


def test_unexpected_representation_error_message():
    err = UnexpectedRepresentationError("data=absent, response=absent")
    assert "data=absent, response=absent" in str(err)
    assert repr(err) == "UnexpectedRepresentationError(shape='data=absent, response=absent')"
    assert err == UnexpectedRepresentationError("data=absent, response=absent")
    assert len({err, UnexpectedRepresentationError("data=absent, response=absent")}) == 1
