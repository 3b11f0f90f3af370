"""Preprint resource service.

Read and update calls are single codec round trips. Creation is a
multi-step workflow and is delegated to
:class:`~osfapi.services.creation.PreprintCreationWorkflow`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from os import PathLike
from typing import TYPE_CHECKING, BinaryIO

from osfapi.errors import DecodeError
from osfapi.schemas.file import File
from osfapi.schemas.jsonapi import CollectionPayload, ResourceReference, SinglePayload
from osfapi.schemas.pagination import ListOptions
from osfapi.schemas.preprint import (
    TYPE_PREPRINTS,
    Preprint,
    PreprintLinks,
    PreprintRequest,
    build_preprint,
)

if TYPE_CHECKING:
    from osfapi.client import OSFClient
    from osfapi.codec import RelationshipInput
    from osfapi.services.creation import CreationResult
    from osfapi.transport import Cancellation

logger = logging.getLogger(__name__)


class PreprintService:
    """Service for preprint listing, retrieval, creation and updates.

    Args:
        client: The owning client (request building, transport, codec).
    """

    def __init__(self, client: OSFClient) -> None:
        self.client = client

    def list_preprints(
        self,
        options: ListOptions | None = None,
    ) -> tuple[list[Preprint], CollectionPayload[Preprint, PreprintLinks]]:
        """List preprints, optionally filtered and paginated.

        Returns:
            Tuple of (preprints in service order, collection payload). The
            payload's ``pagination_meta`` tells where this page sits.
        """
        request = self.client.new_request("GET", "preprints/", options=options)
        result = self.client.codec.execute_many(
            self.client.transport,
            request,
            Preprint,
            PreprintLinks,
            resource_type=TYPE_PREPRINTS,
            build=build_preprint,
        )
        return result.values, result.payload

    def get_preprint(
        self,
        preprint_id: str,
    ) -> tuple[Preprint, SinglePayload[Preprint, PreprintLinks]]:
        """Fetch one preprint by id."""
        request = self.client.new_request("GET", f"preprints/{preprint_id}/")
        result = self.client.codec.execute_single(
            self.client.transport,
            request,
            Preprint,
            PreprintLinks,
            resource_type=TYPE_PREPRINTS,
            build=build_preprint,
        )
        return result.value, result.payload

    def update_preprint(
        self,
        preprint_id: str,
        attributes: PreprintRequest | None = None,
        relationships: Mapping[str, RelationshipInput] | None = None,
        cancellation: Cancellation | None = None,
    ) -> tuple[Preprint, SinglePayload[Preprint, PreprintLinks]]:
        """PATCH a preprint's attributes and/or relationships.

        Passing ``attributes=None`` sends a relationship-only update.
        """
        logger.debug(
            "Updating preprint %s (attributes=%s, relationships=%s)",
            preprint_id,
            attributes is not None,
            sorted(relationships or ()),
        )
        body = self.client.codec.encode_single(
            TYPE_PREPRINTS,
            id=preprint_id,
            attributes=attributes,
            relationships=relationships,
        )
        request = self.client.new_request("PATCH", f"preprints/{preprint_id}/", body=body)
        result = self.client.codec.execute_single(
            self.client.transport,
            request,
            Preprint,
            PreprintLinks,
            resource_type=TYPE_PREPRINTS,
            build=build_preprint,
            cancellation=cancellation,
        )
        return result.value, result.payload

    def create_preprint(
        self,
        attributes: PreprintRequest,
        primary_file: str | PathLike[str] | BinaryIO,
        *,
        provider_id: str | None = None,
        file_name: str | None = None,
        publish: bool | None = None,
        cancellation: Cancellation | None = None,
    ) -> CreationResult:
        """Create a preprint together with its primary file.

        See :meth:`PreprintCreationWorkflow.run` for the stage sequence and
        failure reporting. ``publish`` defaults to ``attributes.is_published``.
        """
        from osfapi.services.creation import PreprintCreationWorkflow

        workflow = PreprintCreationWorkflow(self.client)
        return workflow.run(
            provider_id or attributes.provider_id or "",
            attributes,
            primary_file,
            file_name=file_name,
            publish=publish,
            cancellation=cancellation,
        )

    def get_primary_file(self, preprint_id: str) -> File:
        """Fetch the primary file of a preprint through its relationship.

        Raises:
            DecodeError: If the preprint carries no ``primary_file``
                relationship.
        """
        _, payload = self.get_preprint(preprint_id)
        envelope = payload.data
        relationship = envelope.relationships.get("primary_file") if envelope else None
        if relationship is None:
            raise DecodeError(f"preprint {preprint_id} has no primary_file relationship")

        if isinstance(relationship.data, ResourceReference):
            file, _ = self.client.files.get_file(relationship.data.id)
            return file

        related = relationship.links.related if relationship.links else None
        if related is None:
            raise DecodeError(f"preprint {preprint_id} primary_file relationship has no linkage")
        href = related if isinstance(related, str) else related.href
        file, _ = self.client.files.get_file_by_url(href)
        return file
