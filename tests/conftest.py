import pytest

from httpclient.client import TransportClient
from httpclient.harness import InterceptingTransport


@pytest.fixture
def transport():
    stub = InterceptingTransport()
    stub.install()
    try:
        yield stub
    finally:
        stub.uninstall()


@pytest.fixture
def client(transport):
    return TransportClient(transport)
