"""OSF API client.

OSFClient wires settings, transport and codec together and exposes one
service object per resource family:

    with OSFClient(authenticated_httpx_client) as client:
        preprints, payload = client.preprints.list_preprints(ListOptions(page=2))
        print(payload.pagination_meta.total)

Authentication is not handled here; hand in an ``httpx.Client`` that
already carries the token (or a custom TransportAdapter).
"""

from __future__ import annotations

import httpx

from osfapi.codec import EnvelopeCodec
from osfapi.config import Settings, get_settings
from osfapi.schemas.pagination import ListOptions
from osfapi.services.citation_service import CitationService
from osfapi.services.file_service import FileService
from osfapi.services.preprint_service import PreprintService
from osfapi.services.provider_service import PreprintProviderService
from osfapi.transport import HTTPXTransport, RequestDescriptor, TransportAdapter, build_url


class OSFClient:
    """Entry point of the library.

    Args:
        http_client: Pre-configured (typically authenticated) ``httpx.Client``.
            Ignored when ``transport`` is given.
        settings: Explicit settings; defaults to the environment (``OSF_*``).
        transport: Custom transport adapter.
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        *,
        settings: Settings | None = None,
        transport: TransportAdapter | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.transport = transport or HTTPXTransport(http_client, timeout=self.settings.timeout)
        self.codec = EnvelopeCodec(default_per_page=self.settings.default_per_page)

        self.preprints = PreprintService(self)
        self.files = FileService(self)
        self.preprint_providers = PreprintProviderService(self)
        self.citations = CitationService(self)

    @property
    def base_url(self) -> str:
        return self.settings.base_url

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def default_headers(self, has_body: bool = False) -> dict[str, str]:
        """Headers sent with every API request."""
        headers = {"Accept": "*/*"}
        if has_body:
            headers["Content-Type"] = "application/json"
        if self.settings.user_agent:
            headers["User-Agent"] = self.settings.user_agent
        return headers

    def new_request(
        self,
        method: str,
        path: str,
        body: bytes | None = None,
        options: ListOptions | None = None,
    ) -> RequestDescriptor:
        """Build a request against the API base URL.

        Args:
            method: HTTP method.
            path: Path relative to ``base_url`` (e.g. ``"preprints/"``).
            body: Encoded JSON:API request document.
            options: List options rendered into the query string.

        Raises:
            ValueError: If the configured base URL lacks its trailing slash.
        """
        params = options.to_query() if options is not None else None
        return RequestDescriptor(
            method=method,
            url=build_url(self.base_url, path, params),
            headers=self.default_headers(has_body=body is not None),
            content=body,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> OSFClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
