"""Pydantic v2 schemas for preprints.

Defines the decoded preprint attribute shape, its links, and the request
model used for preprint creation and updates.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from osfapi.schemas.jsonapi import PrimaryKeyModel, ResourceEnvelope

TYPE_PREPRINTS = "preprints"


class LinkAvailability(str, Enum):
    """Answer to the data-links and preregistration-links questions.

    A request field left at ``None`` is unset and is not sent.
    """

    AVAILABLE = "available"
    NO = "no"
    NOT_APPLICABLE = "not_applicable"


class LicenseRecord(BaseModel):
    """License details attached to a preprint."""

    copyright_holders: list[str] = Field(default_factory=list)
    year: str | None = None


class Subject(BaseModel):
    """One taxonomy entry of a preprint's subject hierarchy."""

    id: str
    text: str


class PreprintLinks(BaseModel):
    """Links returned alongside a preprint resource."""

    model_config = ConfigDict(populate_by_name=True)

    self_link: str | None = Field(default=None, alias="self")
    html: str | None = None
    preprint_doi: str | None = None


class Preprint(PrimaryKeyModel):
    """Attributes of a preprint, with its id and links folded in."""

    id: str = ""

    date_created: datetime | None = None
    date_modified: datetime | None = None
    date_published: datetime | None = None
    original_publication_date: datetime | None = None
    doi: str | None = None
    title: str = ""
    description: str = ""
    is_published: bool = False
    is_preprint_orphan: bool | None = None
    license_record: LicenseRecord | None = None
    tags: list[str] = Field(default_factory=list)
    preprint_doi_created: datetime | None = None
    date_withdrawn: datetime | None = None
    public: bool = False
    reviews_state: str | None = None
    date_last_transitioned: datetime | None = None
    has_coi: bool | None = None
    conflict_of_interest_statement: str | None = None
    subjects: list[list[Subject]] = Field(default_factory=list)
    has_data_links: LinkAvailability | None = None
    why_no_data: str | None = None
    data_links: list[str] = Field(default_factory=list)
    has_prereg_links: LinkAvailability | None = None
    why_no_prereg: str | None = None
    prereg_links: list[str] = Field(default_factory=list)
    prereg_link_info: str | None = None
    current_user_permissions: list[str] = Field(default_factory=list)

    links: PreprintLinks | None = Field(default=None, exclude=True)


class PreprintRequest(BaseModel):
    """Writable preprint attributes. Every field is optional.

    ``provider_id`` is not an attribute: it becomes the ``provider``
    relationship of a creation request.
    """

    provider_id: str | None = Field(default=None, exclude=True)

    title: str | None = None
    description: str | None = None
    is_published: bool | None = None
    subjects: list[list[str]] | None = None
    original_publication_date: datetime | None = None
    doi: str | None = None
    license_record: LicenseRecord | None = None
    tags: list[str] | None = None
    preprint_doi_created: datetime | None = None
    public: bool | None = None
    has_coi: bool | None = None
    conflict_of_interest_statement: str | None = None
    has_data_links: LinkAvailability | None = None
    why_no_data: str | None = None
    data_links: list[str] | None = None
    has_prereg_links: LinkAvailability | None = None
    why_no_prereg: str | None = None
    prereg_links: list[str] | None = None


def build_preprint(envelope: ResourceEnvelope[Preprint, PreprintLinks]) -> Preprint:
    """Fold the envelope's links into the decoded preprint."""
    preprint = envelope.attributes or Preprint(id=envelope.id or "")
    preprint.links = envelope.links
    return preprint
