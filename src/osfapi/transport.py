"""HTTP transport abstraction.

TransportAdapter is the single seam between the codec and the network: it
issues exactly one request and hands back the raw bytes with the response
metadata the codec needs (status, headers and the final request URL). It
never looks inside the body.

HTTPXTransport is the production implementation on top of ``httpx.Client``.
Authentication is the client's business: pass an ``httpx.Client`` already
configured with auth headers or an ``httpx.Auth`` flow.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, ConfigDict, Field

from osfapi.errors import CancelledError, TransportError

logger = logging.getLogger(__name__)


class RequestDescriptor(BaseModel):
    """Everything needed to issue one HTTP request.

    ``url`` is absolute and already carries its query string. ``content``
    is either the complete body or an iterable of byte chunks streamed as
    they are produced; streamed bodies should state ``Content-Length`` in
    ``headers``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    content: Any = None


class RawResponse(BaseModel):
    """Undecoded response returned by a transport."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class Cancellation:
    """Externally controlled cancel flag with an optional deadline.

    One instance may be shared by every call of a logical operation. Any
    thread may call :meth:`cancel`; the flag is checked before each request
    is sent, and the remaining time bounds the per-request timeout.

    Args:
        timeout: Seconds from now after which the operation counts as
            cancelled. ``None`` means no deadline.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or ``None`` without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self, operation: str = "request") -> None:
        """Raise :class:`CancelledError` once cancelled or past the deadline."""
        if self._event.is_set():
            raise CancelledError(f"{operation} cancelled")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            raise CancelledError(f"{operation} deadline exceeded")


class TransportAdapter(ABC):
    """Base interface for issuing a single HTTP request."""

    @abstractmethod
    def send(
        self,
        request: RequestDescriptor,
        cancellation: Cancellation | None = None,
    ) -> RawResponse:
        """Send ``request`` and return the raw response.

        Args:
            request: The fully built request.
            cancellation: Optional cancel flag / deadline checked before
                sending.

        Raises:
            TransportError: On any network or protocol failure, or when a
                streamed request body cannot be read.
            CancelledError: If ``cancellation`` has been tripped.
        """
        ...

    def close(self) -> None:
        """Release any resources held by the transport."""


class HTTPXTransport(TransportAdapter):
    """Transport backed by a synchronous ``httpx.Client``.

    Holds no per-request state, so one instance may serve many threads as
    long as the wrapped ``httpx.Client`` does (it does).

    Args:
        client: Pre-configured (e.g. authenticated) client. When omitted the
            transport creates and owns one.
        timeout: Default per-request timeout in seconds.
    """

    def __init__(self, client: httpx.Client | None = None, timeout: float = 30.0) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self._timeout = timeout

    def send(
        self,
        request: RequestDescriptor,
        cancellation: Cancellation | None = None,
    ) -> RawResponse:
        timeout = self._timeout
        if cancellation is not None:
            cancellation.raise_if_cancelled(f"{request.method} {request.url}")
            remaining = cancellation.remaining()
            if remaining is not None:
                timeout = min(timeout, remaining)

        logger.debug("%s %s", request.method, request.url)
        try:
            response = self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.content,
                timeout=timeout,
            )
        except (httpx.HTTPError, OSError) as exc:
            # OSError comes from reading a streamed request body.
            raise TransportError(
                f"{request.method} {request.url} failed: {exc}",
                method=request.method,
                url=request.url,
            ) from exc

        logger.debug(
            "%s %s -> %d (%d bytes)",
            request.method,
            request.url,
            response.status_code,
            len(response.content),
        )
        return RawResponse(
            status_code=response.status_code,
            url=str(response.request.url),
            headers=dict(response.headers),
            body=response.content,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


def iter_chunks(stream: Any, chunk_size: int = 64 * 1024) -> Iterable[bytes]:
    """Yield ``stream`` in fixed-size chunks without reading it whole."""
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        yield chunk


def build_url(base: str, path: str, params: list[tuple[str, str]] | None = None) -> str:
    """Join ``path`` onto ``base`` and append ``params`` as a query string.

    ``base`` must end with a slash. Absolute ``path`` values (e.g. links
    returned by the service) are used as they are.

    Raises:
        ValueError: If ``base`` lacks its trailing slash.
    """
    if not base.endswith("/"):
        raise ValueError(f"base URL must have a trailing slash, but {base!r} does not")
    url = path if path.startswith(("http://", "https://")) else base + path.lstrip("/")
    if params:
        url += ("&" if "?" in url else "?") + urlencode(params)
    return url
