"""Unit tests for the HTTP transport and request building."""

from __future__ import annotations

import httpx
import pytest

from osfapi.client import OSFClient
from osfapi.config import Settings
from osfapi.errors import CancelledError, TransportError
from osfapi.schemas.pagination import ListOptions
from osfapi.transport import (
    Cancellation,
    HTTPXTransport,
    RequestDescriptor,
    build_url,
    iter_chunks,
)

from .fakes import BrokenStream


def _transport(handler) -> HTTPXTransport:
    return HTTPXTransport(httpx.Client(transport=httpx.MockTransport(handler)))


class TestHTTPXTransport:
    """Tests for HTTPXTransport.send."""

    def test_returns_raw_response(self) -> None:
        """Status, headers, body and final URL should be passed through untouched."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201, content=b'{"data": null}', headers={"X-Test": "1"})

        transport = _transport(handler)
        response = transport.send(RequestDescriptor(method="GET", url="https://api.osf.io/v2/preprints/?page=2"))
        assert response.status_code == 201
        assert response.body == b'{"data": null}'
        assert response.headers["x-test"] == "1"
        assert response.url == "https://api.osf.io/v2/preprints/?page=2"
        assert response.is_success

    def test_wraps_network_errors(self) -> None:
        """httpx failures should surface as TransportError with the cause chained."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = _transport(handler)
        with pytest.raises(TransportError, match="connection refused") as exc_info:
            transport.send(RequestDescriptor(method="GET", url="https://api.osf.io/v2/"))
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert exc_info.value.method == "GET"

    def test_wraps_unreadable_upload_body(self) -> None:
        """A body stream that fails mid-read should surface as TransportError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201)

        request = RequestDescriptor(
            method="PUT",
            url="https://files.osf.io/v1/resources/abc12/providers/osfstorage/",
            content=iter_chunks(BrokenStream()),
        )
        with pytest.raises(TransportError, match="disk read failed") as exc_info:
            _transport(handler).send(request)
        assert isinstance(exc_info.value.__cause__, OSError)
        assert exc_info.value.method == "PUT"

    def test_cancelled_request_is_not_sent(self) -> None:
        """A cancelled token should stop the request before it is sent."""
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200)

        token = Cancellation()
        token.cancel()
        with pytest.raises(CancelledError, match="cancelled"):
            _transport(handler).send(RequestDescriptor(method="GET", url="https://api.osf.io/v2/"), token)
        assert calls == []

    def test_expired_deadline_is_cancellation(self) -> None:
        """A deadline in the past counts as cancellation."""
        token = Cancellation(timeout=0)
        assert token.cancelled
        assert token.remaining() == 0.0
        with pytest.raises(CancelledError, match="deadline"):
            _transport(lambda r: httpx.Response(200)).send(
                RequestDescriptor(method="GET", url="https://api.osf.io/v2/"), token
            )

    def test_streams_chunked_content(self) -> None:
        """Iterable bodies should reach the server intact with the stated length."""
        seen: dict[str, object] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.read()
            seen["length"] = request.headers.get("content-length")
            return httpx.Response(200)

        chunks = [b"a" * 10, b"b" * 5]
        _transport(handler).send(
            RequestDescriptor(method="PUT", url="https://files.osf.io/v1/", headers={"Content-Length": "15"}, content=iter(chunks))
        )
        assert seen == {"body": b"a" * 10 + b"b" * 5, "length": "15"}


class TestIterChunks:
    """Tests for iter_chunks."""

    def test_reads_in_fixed_sizes(self, tmp_path) -> None:
        """Streams should be yielded chunk by chunk."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"x" * 10)
        with path.open("rb") as stream:
            assert [len(c) for c in iter_chunks(stream, chunk_size=4)] == [4, 4, 2]


class TestRequestBuilding:
    """Tests for URL and header construction."""

    def test_build_url_requires_trailing_slash(self) -> None:
        """A base URL without trailing slash is rejected."""
        with pytest.raises(ValueError, match="trailing slash"):
            build_url("https://api.osf.io/v2", "preprints/")

    def test_build_url_keeps_absolute_paths(self) -> None:
        """Absolute links from the service are used verbatim."""
        url = build_url("https://api.osf.io/v2/", "https://api.osf.io/v2/files/abc/")
        assert url == "https://api.osf.io/v2/files/abc/"

    def test_new_request_with_options(self, client: OSFClient) -> None:
        """List options should be encoded into the request URL."""
        request = client.new_request("GET", "preprints/", options=ListOptions(page=2, filter={"provider": "osf"}))
        assert request.url == "https://api.test.osf.io/v2/preprints/?page%5Bnumber%5D=2&filter%5Bprovider%5D=osf"

    def test_headers(self, client: OSFClient) -> None:
        """Accept and User-Agent always; Content-Type only with a body."""
        bare = client.new_request("GET", "preprints/")
        assert bare.headers == {"Accept": "*/*", "User-Agent": "osfapi-tests"}
        with_body = client.new_request("POST", "preprints/", body=b"{}")
        assert with_body.headers["Content-Type"] == "application/json"

    def test_bad_base_url_rejected(self) -> None:
        """A misconfigured base URL fails when a request is built."""
        settings = Settings(_env_file=None, base_url="https://api.osf.io/v2")
        osf = OSFClient(transport=HTTPXTransport(httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))), settings=settings)
        with pytest.raises(ValueError, match="trailing slash"):
            osf.new_request("GET", "preprints/")
