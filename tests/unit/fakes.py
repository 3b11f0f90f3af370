"""In-memory stand-in for the OSF API and storage hosts."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx

API = "https://api.test.osf.io/v2/"
STORAGE = "https://files.test.osf.io/v1/"

Route = Callable[[httpx.Request], httpx.Response]


class FakeOSF:
    """Routes requests by ``(method, path)`` and records every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Route] = {}

    def add(
        self,
        method: str,
        path: str,
        document: Any = None,
        status: int = 200,
        handler: Route | None = None,
    ) -> None:
        if handler is None:

            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(status, json=document)

        self._routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"errors": [{"detail": "Not found."}]})
        return route(request)

    def bodies(self) -> list[Any]:
        """JSON bodies of the recorded requests (``None`` for non-JSON)."""
        decoded = []
        for request in self.requests:
            try:
                decoded.append(json.loads(request.content))
            except ValueError:
                decoded.append(None)
        return decoded


class BrokenStream:
    """A named binary stream whose reads fail like a dying disk."""

    name = "paper.pdf"

    def read(self, size: int = -1) -> bytes:
        raise OSError("disk read failed")
