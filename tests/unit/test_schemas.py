"""Unit tests for resource schemas."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from osfapi.codec import EnvelopeCodec
from osfapi.errors import DecodeError
from osfapi.schemas.preprint import LinkAvailability, PreprintRequest
from osfapi.schemas.provider import PreprintProvider, PreprintProviderLinks, ProviderSubject


class TestProviderSubject:
    """Tests for the two-element subjects_acceptable encoding."""

    def test_decodes_pair(self) -> None:
        """A [ids, bool] pair should decode into named fields."""
        subject = ProviderSubject.model_validate([["id1", "id2"], True])
        assert subject.taxonomy_ids == ["id1", "id2"]
        assert subject.include_all_children is True

    def test_encodes_back_to_pair(self) -> None:
        """Re-encoding should produce the identical two-element array."""
        subject = ProviderSubject.model_validate([["id1", "id2"], True])
        assert subject.model_dump() == [["id1", "id2"], True]
        assert json.loads(subject.model_dump_json()) == [["id1", "id2"], True]

    def test_accepts_keyword_construction(self) -> None:
        """Python callers may still build the model from named fields."""
        subject = ProviderSubject(taxonomy_ids=["a"], include_all_children=False)
        assert subject.model_dump() == [["a"], False]

    @pytest.mark.parametrize(
        ("value", "message"),
        [
            ([["id1"]], "length 2"),
            ([["id1"], True, False], "length 2"),
            (["id1", True], "array of string"),
            ([["id1", 3], True], "array of string"),
            ([["id1"], "true"], "must be a boolean"),
            ([["id1"], 1], "must be a boolean"),
        ],
    )
    def test_rejects_malformed_pairs(self, value: object, message: str) -> None:
        """Wrong length or element types should fail validation."""
        with pytest.raises(ValidationError, match=message):
            ProviderSubject.model_validate(value)

    def test_malformed_pair_is_decode_error(self, make_response) -> None:
        """Through the codec a malformed pair surfaces as DecodeError."""
        document = {
            "data": {
                "type": "preprint_providers",
                "id": "osf",
                "attributes": {"name": "OSF Preprints", "subjects_acceptable": [[["id1"], True, 1]]},
            }
        }
        with pytest.raises(DecodeError):
            EnvelopeCodec().decode_single(make_response(document), PreprintProvider, PreprintProviderLinks)

    def test_object_form_rejected_in_responses(self, make_response) -> None:
        """A response must carry the pair, not an object with named fields."""
        document = {
            "data": {
                "type": "preprint_providers",
                "id": "osf",
                "attributes": {
                    "name": "OSF Preprints",
                    "subjects_acceptable": [{"taxonomy_ids": ["id1"], "include_all_children": True}],
                },
            }
        }
        with pytest.raises(DecodeError, match="length 2"):
            EnvelopeCodec().decode_single(make_response(document), PreprintProvider, PreprintProviderLinks)

    def test_object_form_accepted_from_python(self) -> None:
        """Validating named fields outside a response document still works."""
        subject = ProviderSubject.model_validate({"taxonomy_ids": ["id1"], "include_all_children": True})
        assert subject.model_dump() == [["id1"], True]


class TestPreprintProvider:
    """Tests for PreprintProvider decoding."""

    def test_decodes_hyphenated_field_and_subjects(self) -> None:
        """The social-instagram alias and subject pairs should decode."""
        provider = PreprintProvider.model_validate(
            {
                "name": "OSF Preprints",
                "social-instagram": "osf",
                "subjects_acceptable": [[["s1"], False], [["s2", "s3"], True]],
            }
        )
        assert provider.social_instagram == "osf"
        assert [s.taxonomy_ids for s in provider.subjects_acceptable] == [["s1"], ["s2", "s3"]]


class TestPreprintRequest:
    """Tests for PreprintRequest serialization."""

    def test_unset_fields_and_provider_are_not_serialized(self) -> None:
        """Only set fields are sent; provider_id never is."""
        request = PreprintRequest(provider_id="osf", title="T")
        assert request.model_dump(mode="json", exclude_none=True) == {"title": "T"}

    def test_link_availability_values(self) -> None:
        """The tri-state answers serialize to their wire strings."""
        request = PreprintRequest(
            has_data_links=LinkAvailability.NOT_APPLICABLE,
            has_prereg_links=LinkAvailability.AVAILABLE,
        )
        assert request.model_dump(mode="json", exclude_none=True) == {
            "has_data_links": "not_applicable",
            "has_prereg_links": "available",
        }

    def test_link_availability_rejects_unknown(self) -> None:
        """Only the three defined answers are accepted."""
        with pytest.raises(ValidationError):
            PreprintRequest(has_data_links="maybe")
