"""Preprint provider resource service."""

from __future__ import annotations

from typing import TYPE_CHECKING

from osfapi.schemas.jsonapi import CollectionPayload, SinglePayload
from osfapi.schemas.pagination import ListOptions
from osfapi.schemas.provider import (
    PreprintProvider,
    PreprintProviderLinks,
    build_preprint_provider,
)

if TYPE_CHECKING:
    from osfapi.client import OSFClient


class PreprintProviderService:
    """Service for listing and fetching preprint providers."""

    def __init__(self, client: OSFClient) -> None:
        self.client = client

    def list_providers(
        self,
        options: ListOptions | None = None,
    ) -> tuple[list[PreprintProvider], CollectionPayload[PreprintProvider, PreprintProviderLinks]]:
        """List preprint providers."""
        request = self.client.new_request("GET", "preprint_providers/", options=options)
        result = self.client.codec.execute_many(
            self.client.transport,
            request,
            PreprintProvider,
            PreprintProviderLinks,
            build=build_preprint_provider,
        )
        return result.values, result.payload

    def get_provider(
        self,
        provider_id: str,
    ) -> tuple[PreprintProvider, SinglePayload[PreprintProvider, PreprintProviderLinks]]:
        """Fetch one preprint provider by id (e.g. ``"osf"``)."""
        request = self.client.new_request("GET", f"preprint_providers/{provider_id}/")
        result = self.client.codec.execute_single(
            self.client.transport,
            request,
            PreprintProvider,
            PreprintProviderLinks,
            build=build_preprint_provider,
        )
        return result.value, result.payload
