"""Pydantic v2 schemas for citation styles."""

from __future__ import annotations

from datetime import datetime

from osfapi.schemas.jsonapi import PrimaryKeyModel


class CitationStyle(PrimaryKeyModel):
    """A citation style the service can render citations in."""

    id: str = ""

    title: str = ""
    short_title: str | None = None
    summary: str | None = None
    date_parsed: datetime | None = None
