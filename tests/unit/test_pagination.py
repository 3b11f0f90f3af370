"""Unit tests for pagination helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from osfapi.schemas.pagination import (
    ListOptions,
    PaginationLinks,
    PaginationLinksMeta,
    derive_pagination_meta,
)


class TestListOptions:
    """Tests for ListOptions.to_query."""

    def test_renders_page_and_filters(self) -> None:
        """Page, size and each filter should become bracketed parameters."""
        options = ListOptions(page=2, per_page=2, filter={"reviews_state": "pending", "provider": "osf"})
        assert options.to_query() == [
            ("page[number]", "2"),
            ("page[size]", "2"),
            ("filter[reviews_state]", "pending"),
            ("filter[provider]", "osf"),
        ]

    def test_unset_options_are_omitted(self) -> None:
        """An empty ListOptions should render no parameters."""
        assert ListOptions().to_query() == []

    def test_page_must_be_positive(self) -> None:
        """Page numbers start at 1."""
        with pytest.raises(ValidationError):
            ListOptions(page=0)


class TestDerivePaginationMeta:
    """Tests for derive_pagination_meta."""

    def test_legacy_page_parameters(self) -> None:
        """Plain page / per_page parameters are understood too."""
        meta = derive_pagination_meta(None, "https://api.osf.io/v2/preprints/?page=4&per_page=25")
        assert (meta.page, meta.per_page) == (4, 25)

    def test_meta_without_per_page_keeps_query_size(self) -> None:
        """A meta object lacking per_page leaves the requested size in place."""
        links = PaginationLinks(meta=PaginationLinksMeta(total=7))
        meta = derive_pagination_meta(links, "https://api.osf.io/v2/preprints/?page%5Bsize%5D=3")
        assert (meta.total, meta.per_page, meta.page) == (7, 3, 1)

    def test_non_numeric_page_falls_back(self) -> None:
        """Garbage page values fall back to the defaults."""
        meta = derive_pagination_meta(None, "https://api.osf.io/v2/preprints/?page%5Bnumber%5D=x")
        assert meta.page == 1

    def test_custom_default_per_page(self) -> None:
        """The fallback page size is configurable."""
        assert derive_pagination_meta(None, None, default_per_page=50).per_page == 50

    def test_has_next(self) -> None:
        """has_next is false on the last page."""
        links = PaginationLinks(meta=PaginationLinksMeta(total=20, per_page=10))
        assert not derive_pagination_meta(links, "https://x/?page%5Bnumber%5D=2").has_next
