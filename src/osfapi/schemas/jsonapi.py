"""JSON:API envelope models using Pydantic v2.

Mirrors the JSON:API v1.0 document structure the OSF API speaks. The
resource envelope is generic over the attribute shape ``A`` and the links
shape ``L`` so that every resource type reuses the same decoding path:

    SinglePayload[Preprint, PreprintLinks]
    CollectionPayload[File, FileLinks]

Reference: https://jsonapi.org/format/1.0/
"""

from __future__ import annotations

from typing import Any, ClassVar, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from osfapi.schemas.pagination import PaginationLinks, PaginationMeta

A = TypeVar("A")
L = TypeVar("L")

# Validation context for data decoded from a response document.
WIRE_CONTEXT: dict[str, Any] = {"wire": True}


# ---------------------------------------------------------------------------
# Primary-key capability
# ---------------------------------------------------------------------------


@runtime_checkable
class SupportsPrimaryKey(Protocol):
    """Attribute shapes that carry the envelope ``id`` inside themselves."""

    primary_key_field: str

    def set_primary_key(self, value: str) -> None: ...

    def get_primary_key(self) -> str | None: ...


class PrimaryKeyModel(BaseModel):
    """Base for attribute shapes whose identity lives in an ``id`` field.

    The wire format carries the identifier next to ``attributes`` rather
    than inside it, so the codec copies it in after decoding and takes it
    back out when encoding.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    primary_key_field: ClassVar[str] = "id"

    def set_primary_key(self, value: str) -> None:
        setattr(self, self.primary_key_field, value)

    def get_primary_key(self) -> str | None:
        return getattr(self, self.primary_key_field)


# ---------------------------------------------------------------------------
# Relationships
# ---------------------------------------------------------------------------


class ResourceReference(BaseModel):
    """A resource identifier object: a weak ``(type, id)`` reference."""

    model_config = ConfigDict(frozen=True)

    type: str
    id: str


class LinkObject(BaseModel):
    """A link given as an object rather than a bare URL."""

    model_config = ConfigDict(frozen=True)

    href: str
    meta: dict[str, Any] | None = None


class RelationshipLinks(BaseModel):
    """The ``links`` member of a relationship object."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    self_link: str | LinkObject | None = Field(default=None, alias="self")
    related: str | LinkObject | None = None


class Relationship(BaseModel):
    """A relationship object.

    ``data`` is a single reference for to-one relationships; to-many
    relationships, when the service embeds linkage at all, carry a list.
    """

    model_config = ConfigDict(frozen=True)

    links: RelationshipLinks | None = None
    data: ResourceReference | list[ResourceReference] | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def to_one(cls, type: str, id: str) -> Relationship:
        """Build a to-one relationship carrying only resource linkage."""
        return cls(data=ResourceReference(type=type, id=id))


# ---------------------------------------------------------------------------
# Resource envelopes
# ---------------------------------------------------------------------------


class ResourceEnvelope(BaseModel, Generic[A, L]):
    """A single JSON:API resource object with type, id, attributes and links."""

    model_config = ConfigDict(frozen=True)

    type: str
    id: str | None = None
    attributes: A | None = None
    links: L | None = None
    relationships: dict[str, Relationship] = Field(default_factory=dict)


class ErrorSource(BaseModel):
    """Where in the request document an error originated."""

    model_config = ConfigDict(frozen=True)

    pointer: str | None = None
    parameter: str | None = None


class ErrorItem(BaseModel):
    """A single JSON:API error object."""

    model_config = ConfigDict(frozen=True)

    detail: str = ""
    source: ErrorSource | None = None
    status: str | None = None
    title: str | None = None
    code: str | None = None
    meta: dict[str, Any] | None = None

    @property
    def pointer(self) -> str | None:
        """The JSON pointer of the offending request member, if any."""
        return self.source.pointer if self.source else None


class SinglePayload(BaseModel, Generic[A, L]):
    """JSON:API document whose primary data is a single resource."""

    model_config = ConfigDict(frozen=True)

    data: ResourceEnvelope[A, L] | None = None
    errors: list[ErrorItem] = Field(default_factory=list)


class CollectionPayload(BaseModel, Generic[A, L]):
    """JSON:API document whose primary data is a list of resources.

    ``pagination_meta`` is not part of the wire document: the codec derives
    it from ``links.meta`` and the outgoing request's query string.
    """

    model_config = ConfigDict(frozen=True)

    data: list[ResourceEnvelope[A, L]] = Field(default_factory=list)
    links: PaginationLinks | None = None
    errors: list[ErrorItem] = Field(default_factory=list)

    pagination_meta: PaginationMeta | None = Field(default=None, exclude=True)


# ---------------------------------------------------------------------------
# Request wrappers
# ---------------------------------------------------------------------------


class JSONAPIRequestData(BaseModel):
    """The ``data`` object inside a JSON:API request body."""

    type: str
    id: str | None = None
    attributes: dict[str, Any] | None = None
    relationships: dict[str, Relationship] | None = None


class JSONAPIRequest(BaseModel):
    """JSON:API request envelope wrapping ``{ data: { type, id, attributes, relationships } }``."""

    data: JSONAPIRequestData
