"""Unit test configuration.

Unit tests never touch the network: every HTTP exchange goes through
``httpx.MockTransport`` backed by :class:`FakeOSF`, a tiny in-memory stand-in
for the API and storage hosts.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest

from osfapi.client import OSFClient
from osfapi.config import Settings
from osfapi.transport import RawResponse

from .fakes import API, STORAGE, FakeOSF


@pytest.fixture(autouse=True)
def _unit_marker(request: pytest.FixtureRequest) -> None:
    """Auto-apply unit marker to all tests in this directory."""
    request.node.add_marker(pytest.mark.unit)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, base_url=API, storage_url=STORAGE, user_agent="osfapi-tests")


@pytest.fixture
def fake_osf() -> FakeOSF:
    return FakeOSF()


@pytest.fixture
def client(fake_osf: FakeOSF, settings: Settings) -> Iterator[OSFClient]:
    http_client = httpx.Client(transport=httpx.MockTransport(fake_osf))
    with OSFClient(http_client, settings=settings) as osf:
        yield osf
    http_client.close()


@pytest.fixture
def make_response() -> Callable[..., RawResponse]:
    """Build a RawResponse from a JSON-serializable document."""

    def _make(document: Any, status: int = 200, url: str = f"{API}preprints/") -> RawResponse:
        body = document if isinstance(document, bytes) else json.dumps(document).encode()
        return RawResponse(status_code=status, url=url, body=body)

    return _make


@pytest.fixture
def preprint_resource() -> Callable[..., dict[str, Any]]:
    """Build a preprint resource object as the API returns it."""

    def _make(preprint_id: str = "abc12", **attributes: Any) -> dict[str, Any]:
        attrs = {"title": "A preprint", "description": "", "is_published": False}
        attrs.update(attributes)
        return {
            "type": "preprints",
            "id": preprint_id,
            "attributes": attrs,
            "links": {
                "self": f"{API}preprints/{preprint_id}/",
                "html": f"https://osf.io/preprints/{preprint_id}/",
            },
            "relationships": {
                "provider": {
                    "links": {"related": {"href": f"{API}providers/preprints/osf/", "meta": {}}},
                },
            },
        }

    return _make
