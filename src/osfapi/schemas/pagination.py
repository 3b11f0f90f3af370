"""Page-number pagination models and helpers.

The OSF API paginates with ``page[number]`` / ``page[size]`` query
parameters and reports totals inside ``links.meta``. It does not reliably
echo the page number or size back, so both are recovered from the URL of
the request that produced the page.
"""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PER_PAGE = 10

_PAGE_KEYS = ("page[number]", "page")
_PER_PAGE_KEYS = ("page[size]", "per_page")


class PaginationLinksMeta(BaseModel):
    """The ``meta`` object the service nests inside pagination links."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    per_page: int | None = None


class PaginationLinks(BaseModel):
    """Pagination links for JSON:API list responses."""

    model_config = ConfigDict(frozen=True)

    first: str | None = None
    last: str | None = None
    prev: str | None = None
    next: str | None = None
    meta: PaginationLinksMeta | None = None


class PaginationMeta(BaseModel):
    """Pagination state derived for a decoded collection page."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    per_page: int = DEFAULT_PER_PAGE
    page: int = 1

    @property
    def has_next(self) -> bool:
        """True while pages beyond this one remain."""
        return self.page * self.per_page < self.total


class ListOptions(BaseModel):
    """Query options shared by every list endpoint.

    ``filter`` renders as one ``filter[<field>]=<value>`` pair per entry.
    Unset options are omitted from the query string.
    """

    page: int | None = Field(default=None, ge=1)
    per_page: int | None = Field(default=None, ge=1)
    filter: dict[str, str] = Field(default_factory=dict)

    def to_query(self) -> list[tuple[str, str]]:
        """Render the options as ordered query parameters."""
        params: list[tuple[str, str]] = []
        if self.page is not None:
            params.append(("page[number]", str(self.page)))
        if self.per_page is not None:
            params.append(("page[size]", str(self.per_page)))
        for field, value in self.filter.items():
            params.append((f"filter[{field}]", value))
        return params


def _first_int(query: dict[str, list[str]], keys: tuple[str, ...]) -> int | None:
    for key in keys:
        values = query.get(key)
        if not values:
            continue
        try:
            return int(values[0])
        except ValueError:
            return None
    return None


def derive_pagination_meta(
    links: PaginationLinks | None,
    request_url: str | None,
    default_per_page: int = DEFAULT_PER_PAGE,
) -> PaginationMeta:
    """Combine service-reported totals with the request's page parameters.

    Args:
        links: The decoded ``links`` member of the collection document.
        request_url: Final URL of the request that produced the page.
        default_per_page: Page size assumed when neither the response nor
            the request states one.

    Returns:
        The derived pagination metadata. ``total`` and ``per_page`` prefer
        the response's ``links.meta``; ``page`` always comes from the
        request URL.
    """
    query = parse_qs(urlsplit(request_url).query) if request_url else {}

    page = _first_int(query, _PAGE_KEYS) or 1
    per_page = _first_int(query, _PER_PAGE_KEYS) or default_per_page
    total = 0

    if links is not None and links.meta is not None:
        total = links.meta.total
        if links.meta.per_page:
            per_page = links.meta.per_page

    return PaginationMeta(total=total, per_page=per_page, page=page)
