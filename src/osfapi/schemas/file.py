"""Pydantic v2 schemas for OSF files.

The same shape decodes both API v2 ``files/{id}`` responses and the storage
service's upload response, which is a JSON:API document too.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from osfapi.schemas.jsonapi import PrimaryKeyModel, ResourceEnvelope

TYPE_FILES = "files"


class FileLinks(BaseModel):
    """Storage action links returned with a file resource."""

    new_folder: str | None = None
    move: str | None = None
    upload: str | None = None
    download: str | None = None
    delete: str | None = None


class File(PrimaryKeyModel):
    """Attributes of a stored file, with its id and links folded in."""

    id: str = ""

    kind: str = "file"
    name: str = ""
    last_touched: datetime | None = None
    materialized_path: str | None = None
    date_modified: datetime | None = None
    current_version: int | None = None
    delete_allowed: bool | None = None
    date_created: datetime | None = None
    provider: str | None = None
    path: str | None = None
    current_user_can_comment: bool | None = None
    guid: str | None = None
    size: int | None = None

    links: FileLinks | None = Field(default=None, exclude=True)


def build_file(envelope: ResourceEnvelope[File, FileLinks]) -> File:
    """Fold the envelope's storage links into the decoded file."""
    file = envelope.attributes or File(id=envelope.id or "")
    file.links = envelope.links
    return file
