"""Citation style resource service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from osfapi.schemas.citation import CitationStyle
from osfapi.schemas.jsonapi import CollectionPayload
from osfapi.schemas.pagination import ListOptions

if TYPE_CHECKING:
    from osfapi.client import OSFClient


class CitationService:
    """Service for the citation styles catalogue."""

    def __init__(self, client: OSFClient) -> None:
        self.client = client

    def list_styles(
        self,
        options: ListOptions | None = None,
    ) -> tuple[list[CitationStyle], CollectionPayload[CitationStyle, Any]]:
        """List the citation styles the service can render."""
        request = self.client.new_request("GET", "citations/styles/", options=options)
        result = self.client.codec.execute_many(self.client.transport, request, CitationStyle)
        return result.values, result.payload
