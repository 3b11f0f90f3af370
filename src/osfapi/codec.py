"""Generic JSON:API envelope codec.

EnvelopeCodec is the one place that turns response bytes into typed values
and typed values into request bytes. It is parametrized per call by the
attribute shape and links shape of the resource, so every service shares
the same decoding path:

    result = codec.decode_single(response, Preprint, PreprintLinks,
                                 resource_type="preprints",
                                 build=build_preprint)
    preprint, payload, raw = result

Two post-decode steps happen here and nowhere else:

* primary-key injection: the envelope ``id`` travels next to
  ``attributes``, so it is copied into any attribute shape implementing
  :class:`~osfapi.schemas.jsonapi.SupportsPrimaryKey`;
* pagination derivation: collection pages get a
  :class:`~osfapi.schemas.pagination.PaginationMeta` built from
  ``links.meta`` and the request URL.

The codec keeps no state between calls and is safe to share across threads.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple

from pydantic import BaseModel, ValidationError

from osfapi.errors import DecodeError, ServiceError
from osfapi.schemas.jsonapi import (
    WIRE_CONTEXT,
    CollectionPayload,
    ErrorItem,
    JSONAPIRequest,
    JSONAPIRequestData,
    Relationship,
    ResourceEnvelope,
    ResourceReference,
    SinglePayload,
    SupportsPrimaryKey,
)
from osfapi.schemas.pagination import DEFAULT_PER_PAGE, PaginationMeta, derive_pagination_meta
from osfapi.transport import Cancellation, RawResponse, RequestDescriptor, TransportAdapter

logger = logging.getLogger(__name__)

BuildFn = Callable[[ResourceEnvelope[Any, Any]], Any]
RelationshipInput = Relationship | ResourceReference | Mapping[str, Any]


class SingleResult(NamedTuple):
    """Decoded single-resource response."""

    value: Any
    payload: SinglePayload[Any, Any]
    response: RawResponse


class CollectionResult(NamedTuple):
    """Decoded collection response, values in wire order."""

    values: list[Any]
    payload: CollectionPayload[Any, Any]
    response: RawResponse

    @property
    def pagination(self) -> PaginationMeta | None:
        """Where this page sits in the full collection."""
        return self.payload.pagination_meta


class EnvelopeCodec:
    """Encode and decode JSON:API documents for arbitrary resource shapes.

    Args:
        default_per_page: Page size assumed when neither a collection
            response nor its request states one.
    """

    def __init__(self, default_per_page: int = DEFAULT_PER_PAGE) -> None:
        self.default_per_page = default_per_page

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def decode_single(
        self,
        response: RawResponse,
        attributes_type: Any,
        links_type: Any = None,
        *,
        resource_type: str | None = None,
        build: BuildFn | None = None,
    ) -> SingleResult:
        """Decode a document whose primary data is one resource.

        Args:
            response: Raw response from the transport.
            attributes_type: Shape of the ``attributes`` member.
            links_type: Shape of the resource ``links`` member.
            resource_type: Expected ``type`` of the resource, checked when given.
            build: Optional transform from envelope to value. Defaults to
                returning the (primary-key injected) attributes.

        Returns:
            ``SingleResult(value, payload, response)``.

        Raises:
            ServiceError: If the document carries a non-empty ``errors`` array
                or the status is not 2xx.
            DecodeError: If the body is malformed, has no ``data`` or does not
                match the requested shapes.
        """
        document = self._load(response)
        payload_type = SinglePayload[attributes_type, links_type or dict[str, Any]]
        try:
            payload = payload_type.model_validate(document, context=WIRE_CONTEXT)
        except ValidationError as exc:
            raise DecodeError(f"response from {response.url} does not match expected shape: {exc}") from exc

        envelope = payload.data
        if envelope is None:
            raise DecodeError(f"response from {response.url} carries no primary data")
        value = self._finish(envelope, resource_type, build)
        return SingleResult(value, payload, response)

    def decode_many(
        self,
        response: RawResponse,
        attributes_type: Any,
        links_type: Any = None,
        *,
        resource_type: str | None = None,
        build: BuildFn | None = None,
    ) -> CollectionResult:
        """Decode a document whose primary data is a list of resources.

        Same contract as :meth:`decode_single`, applied per element. Element
        order is the wire order. The payload's ``pagination_meta`` is derived
        from ``links.meta`` and the query string of ``response.url``.
        """
        document = self._load(response)
        payload_type = CollectionPayload[attributes_type, links_type or dict[str, Any]]
        try:
            payload = payload_type.model_validate(document, context=WIRE_CONTEXT)
        except ValidationError as exc:
            raise DecodeError(f"response from {response.url} does not match expected shape: {exc}") from exc

        values = [self._finish(envelope, resource_type, build) for envelope in payload.data]
        meta = derive_pagination_meta(payload.links, response.url, self.default_per_page)
        payload = payload.model_copy(update={"pagination_meta": meta})
        return CollectionResult(values, payload, response)

    def _load(self, response: RawResponse) -> dict[str, Any]:
        try:
            document = json.loads(response.body)
        except ValueError as exc:
            if not response.is_success:
                raise self._status_error(response) from exc
            raise DecodeError(f"malformed JSON in response from {response.url}: {exc}") from exc

        if not isinstance(document, dict):
            raise DecodeError(f"response from {response.url} is not a JSON:API document")

        errors = document.get("errors")
        if errors:
            try:
                items = [ErrorItem.model_validate(item) for item in errors]
            except (TypeError, ValidationError) as exc:
                raise DecodeError(f"malformed errors array in response from {response.url}") from exc
            logger.debug("Service returned %d error(s) for %s", len(items), response.url)
            raise ServiceError(items, status_code=response.status_code)

        if not response.is_success:
            raise self._status_error(response)
        return document

    @staticmethod
    def _status_error(response: RawResponse) -> ServiceError:
        item = ErrorItem(detail=f"HTTP {response.status_code}", status=str(response.status_code))
        return ServiceError([item], status_code=response.status_code)

    @staticmethod
    def _finish(
        envelope: ResourceEnvelope[Any, Any],
        resource_type: str | None,
        build: BuildFn | None,
    ) -> Any:
        if resource_type is not None and envelope.type != resource_type:
            raise DecodeError(
                f"expected resource of type '{resource_type}', got '{envelope.type}'"
            )

        attributes = envelope.attributes
        if envelope.id is not None and isinstance(attributes, SupportsPrimaryKey):
            try:
                attributes.set_primary_key(envelope.id)
            except ValidationError as exc:
                raise DecodeError(f"cannot assign id '{envelope.id}' to {type(attributes).__name__}") from exc

        if build is not None:
            return build(envelope)
        return attributes

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def encode_single(
        self,
        resource_type: str,
        id: str | None = None,
        attributes: BaseModel | Mapping[str, Any] | None = None,
        relationships: Mapping[str, RelationshipInput] | None = None,
    ) -> bytes:
        """Serialize a JSON:API request document.

        ``id`` is omitted when absent (creation) and ``attributes`` when
        absent (relationship-only updates). An attribute shape with a
        primary key contributes it as ``id`` instead of as an attribute.

        Args:
            resource_type: The resource ``type``.
            id: Identifier of an existing resource.
            attributes: A pydantic model (unset ``None`` fields are dropped)
                or a plain mapping.
            relationships: Relationship name to a reference, a relationship
                object or its mapping form.

        Returns:
            The UTF-8 encoded request body.
        """
        attrs: dict[str, Any] | None = None
        if isinstance(attributes, BaseModel):
            attrs = attributes.model_dump(mode="json", exclude_none=True, by_alias=True)
        elif attributes is not None:
            attrs = dict(attributes)

        if attrs is not None and isinstance(attributes, SupportsPrimaryKey):
            key = attrs.pop(attributes.primary_key_field, None)
            if id is None and key:
                id = key

        rels: dict[str, Relationship] | None = None
        if relationships:
            rels = {name: _as_relationship(rel) for name, rel in relationships.items()}

        document = JSONAPIRequest(
            data=JSONAPIRequestData(
                type=resource_type,
                id=id,
                attributes=attrs,
                relationships=rels,
            )
        )
        return document.model_dump_json(exclude_none=True, by_alias=True).encode()

    # ------------------------------------------------------------------
    # Request execution
    # ------------------------------------------------------------------

    def execute_single(
        self,
        transport: TransportAdapter,
        request: RequestDescriptor,
        attributes_type: Any,
        links_type: Any = None,
        *,
        resource_type: str | None = None,
        build: BuildFn | None = None,
        cancellation: Cancellation | None = None,
    ) -> SingleResult:
        """Send ``request`` through ``transport`` and decode one resource."""
        response = transport.send(request, cancellation)
        return self.decode_single(
            response,
            attributes_type,
            links_type,
            resource_type=resource_type,
            build=build,
        )

    def execute_many(
        self,
        transport: TransportAdapter,
        request: RequestDescriptor,
        attributes_type: Any,
        links_type: Any = None,
        *,
        resource_type: str | None = None,
        build: BuildFn | None = None,
        cancellation: Cancellation | None = None,
    ) -> CollectionResult:
        """Send ``request`` through ``transport`` and decode a collection."""
        response = transport.send(request, cancellation)
        return self.decode_many(
            response,
            attributes_type,
            links_type,
            resource_type=resource_type,
            build=build,
        )


def _as_relationship(value: RelationshipInput) -> Relationship:
    if isinstance(value, Relationship):
        return value
    if isinstance(value, ResourceReference):
        return Relationship(data=value)
    return Relationship.model_validate(value)
