"""Pydantic v2 schemas for preprint providers.

``subjects_acceptable`` is the odd one out: each element travels as a
two-element array ``[taxonomy_ids, include_all_children]`` rather than an
object, so :class:`ProviderSubject` carries its own validator and
serializer.
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    model_serializer,
    model_validator,
)

from osfapi.schemas.jsonapi import PrimaryKeyModel, ResourceEnvelope

# Resource type used in relationship linkage to a provider.
TYPE_PROVIDERS = "providers"


class ProviderSubject(BaseModel):
    """One ``subjects_acceptable`` entry of a provider.

    Named fields are accepted from Python callers only; a response document
    must carry the two-element array.
    """

    taxonomy_ids: list[str] = Field(default_factory=list)
    include_all_children: bool = False

    @model_validator(mode="before")
    @classmethod
    def parse_pair(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, dict) and not (info.context or {}).get("wire"):
            return value
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise ValueError("a subjects_acceptable element must be an array of length 2")
        ids, include = value
        if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
            raise ValueError(
                "the first element of a subjects_acceptable element must be an array of string"
            )
        if not isinstance(include, bool):
            raise ValueError(
                "the second element of a subjects_acceptable element must be a boolean"
            )
        return {"taxonomy_ids": ids, "include_all_children": include}

    @model_serializer
    def dump_pair(self) -> list[Any]:
        return [list(self.taxonomy_ids), self.include_all_children]


class PreprintProviderLinks(BaseModel):
    """Links returned alongside a preprint provider."""

    model_config = ConfigDict(populate_by_name=True)

    self_link: str | None = Field(default=None, alias="self")
    preprints: str | None = None
    external_url: str | None = None


class PreprintProvider(PrimaryKeyModel):
    """Attributes of a preprint provider, with its id and links folded in."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""

    name: str = ""
    description: str = ""
    advisory_board: str | None = None
    example: str | None = None
    domain: str | None = None
    domain_redirect_enabled: bool = False
    footer_links: str | None = None
    email_support: str | None = None
    facebook_app_id: int | None = None
    allow_submissions: bool = False
    allow_commenting: bool = False
    assets: dict[str, Any] = Field(default_factory=dict)
    share_source: str | None = None
    share_publish_type: str | None = None
    permissions: list[str] = Field(default_factory=list)
    preprint_word: str | None = None
    additional_providers: list[str] = Field(default_factory=list)
    reviews_workflow: str | None = None
    reviews_comment_private: bool | None = None
    reviews_comment_anonymous: bool | None = None
    header_text: str | None = None
    banner_path: str | None = None
    logo_path: str | None = None
    email_contact: str | None = None
    social_twitter: str | None = None
    social_facebook: str | None = None
    social_instagram: str | None = Field(default=None, alias="social-instagram")
    subjects_acceptable: list[ProviderSubject] = Field(default_factory=list)

    links: PreprintProviderLinks | None = Field(default=None, exclude=True)


def build_preprint_provider(
    envelope: ResourceEnvelope[PreprintProvider, PreprintProviderLinks],
) -> PreprintProvider:
    """Fold the envelope's links into the decoded provider."""
    provider = envelope.attributes or PreprintProvider(id=envelope.id or "")
    provider.links = envelope.links
    return provider
