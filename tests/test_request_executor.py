import base64
import gzip

import httpx
import pytest
from pydantic import SecretStr

from meteofetch.adapters.http_client import REQUEST_TIMEOUT_SECONDS, build_client
from meteofetch.adapters.request_executor import execute
from meteofetch.core.buffer import GrowthBuffer
from meteofetch.core.domain.models import Credentials
from meteofetch.core.errors import (
    CapacityExceededError,
    InvalidMemoryError,
    ResponseTooLargeError,
    TransportError,
)

URL = "https://api.meteomatics.com/2024-10-23T00:00:00Z/t_2m:C/0,0/json"
CREDENTIALS = Credentials(username="user", password=SecretStr("pass"))


class RecordingSink:
    def __init__(self, error=None):
        self.chunks = []
        self.error = error

    def append(self, chunk):
        if self.error is not None:
            raise self.error
        self.chunks.append(chunk)


def _client(handler, make_settings):
    return build_client(make_settings(), transport=httpx.MockTransport(handler))


def test_client_enforces_timeout_and_tls(make_settings):
    with build_client(make_settings()) as client:
        assert client.timeout.read == REQUEST_TIMEOUT_SECONDS == 30.0
        assert client.timeout.connect == 30.0
        assert client.follow_redirects is False


def test_chunks_are_forwarded_verbatim(make_settings):
    def handler(request):
        return httpx.Response(200, content=iter([b'{"a":', b" 1}"]))

    sink = RecordingSink()
    with _client(handler, make_settings) as client:
        received = execute(URL, CREDENTIALS, sink, client=client)

    assert sink.chunks == [b'{"a":', b" 1}"]
    assert received == 8


def test_single_authenticated_get(make_settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=iter([b"{}"]))

    with _client(handler, make_settings) as client:
        execute(URL, CREDENTIALS, GrowthBuffer(), client=client)

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "GET"
    assert str(request.url) == URL
    expected = base64.b64encode(b"user:pass").decode("ascii")
    assert request.headers["Authorization"] == f"Basic {expected}"


def test_full_buffer_aborts_transfer(make_settings):
    def handler(request):
        return httpx.Response(200, content=iter([b"x" * 100]))

    buf = GrowthBuffer(4, 16)
    with _client(handler, make_settings) as client:
        with pytest.raises(ResponseTooLargeError) as info:
            execute(URL, CREDENTIALS, buf, client=client)

    assert isinstance(info.value, TransportError)
    assert isinstance(info.value.__cause__, CapacityExceededError)
    assert info.value.limit == 16
    assert buf.getvalue() == b""


def test_allocation_failure_aborts_transfer(make_settings):
    def handler(request):
        return httpx.Response(200, content=iter([b"{}"]))

    sink = RecordingSink(error=InvalidMemoryError("no memory"))
    with _client(handler, make_settings) as client:
        with pytest.raises(TransportError) as info:
            execute(URL, CREDENTIALS, sink, client=client)

    assert not isinstance(info.value, ResponseTooLargeError)
    assert isinstance(info.value.__cause__, InvalidMemoryError)


@pytest.mark.parametrize(
    "exc_type, fragment",
    [
        (httpx.ConnectError, "Couldn't connect to server"),
        (httpx.ConnectTimeout, "Timeout was reached"),
        (httpx.ReadTimeout, "Timeout was reached"),
        (httpx.RemoteProtocolError, "peer closed"),
    ],
)
def test_transport_failures_are_classified(make_settings, exc_type, fragment):
    def handler(request):
        message = "peer closed connection" if exc_type is httpx.RemoteProtocolError else "boom"
        raise exc_type(message, request=request)

    with _client(handler, make_settings) as client:
        with pytest.raises(TransportError) as info:
            execute(URL, CREDENTIALS, RecordingSink(), client=client)

    assert fragment in info.value.detail
    assert isinstance(info.value.__cause__, httpx.HTTPError)


def test_http_error_status_is_a_transport_error(make_settings):
    def handler(request):
        return httpx.Response(401, content=b'{"user": "leaked"}')

    sink = RecordingSink()
    with _client(handler, make_settings) as client:
        with pytest.raises(TransportError) as info:
            execute(URL, CREDENTIALS, sink, client=client)

    assert info.value.detail == "HTTP 401 Unauthorized"
    assert sink.chunks == []


def test_expired_deadline_aborts_before_body(make_settings):
    def handler(request):
        return httpx.Response(200, content=iter([b"{", b"}"]))

    sink = RecordingSink()
    with _client(handler, make_settings) as client:
        with pytest.raises(TransportError) as info:
            execute(URL, CREDENTIALS, sink, client=client, timeout_seconds=-1)

    assert "timed out" in info.value.detail
    assert sink.chunks == []


def test_client_does_not_request_compression(make_settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=iter([b"{}"]))

    with _client(handler, make_settings) as client:
        execute(URL, CREDENTIALS, RecordingSink(), client=client)

    assert seen[0].headers["Accept-Encoding"] == "identity"


def test_compressed_body_reaches_sink_undecoded(make_settings):
    body = gzip.compress(b"0" * 1_000_000)

    def handler(request):
        return httpx.Response(200, content=iter([body]), headers={"Content-Encoding": "gzip"})

    sink = RecordingSink()
    with _client(handler, make_settings) as client:
        received = execute(URL, CREDENTIALS, sink, client=client)

    assert b"".join(sink.chunks) == body
    assert received == len(body)
    assert max(len(chunk) for chunk in sink.chunks) <= len(body)


def test_compressed_body_counts_against_ceiling(make_settings):
    body = gzip.compress(b"0" * 1_000_000)
    assert len(body) > 64

    def handler(request):
        return httpx.Response(200, content=iter([body]), headers={"Content-Encoding": "gzip"})

    buf = GrowthBuffer(16, 64)
    with _client(handler, make_settings) as client:
        with pytest.raises(ResponseTooLargeError):
            execute(URL, CREDENTIALS, buf, client=client)

    assert buf.size == 0
