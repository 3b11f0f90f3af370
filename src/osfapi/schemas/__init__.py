"""Pydantic schemas for JSON:API envelopes and OSF resource shapes."""

from osfapi.schemas.jsonapi import (
    CollectionPayload,
    ErrorItem,
    ErrorSource,
    PrimaryKeyModel,
    Relationship,
    ResourceEnvelope,
    ResourceReference,
    SinglePayload,
    SupportsPrimaryKey,
)
from osfapi.schemas.pagination import ListOptions, PaginationLinks, PaginationMeta

__all__ = [
    "CollectionPayload",
    "ErrorItem",
    "ErrorSource",
    "ListOptions",
    "PaginationLinks",
    "PaginationMeta",
    "PrimaryKeyModel",
    "Relationship",
    "ResourceEnvelope",
    "ResourceReference",
    "SinglePayload",
    "SupportsPrimaryKey",
]
