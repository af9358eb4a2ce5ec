"""Field name resolution tests."""

import pytest

from flatfill.models import BoundingBox, FieldKind, FieldProposal, FieldType
from flatfill.resolver import (
    FieldAllocator,
    fallback_by_kind,
    preferred_kinds_for,
    resolve_field_name,
    suggest_field_name,
)


KINDS = {
    "Full_Name": FieldKind.TEXT,
    "full_name": FieldKind.TEXT,
    "Email": FieldKind.TEXT,
    "phone_home": FieldKind.TEXT,
    "phone_work": FieldKind.CHECKBOX,
    "country_select": FieldKind.DROPDOWN,
}


class TestResolveFieldName:
    def test_exact_match_wins_over_case_insensitive(self):
        assert resolve_field_name("full_name", ["Full_Name", "full_name"], KINDS) == "full_name"

    def test_case_insensitive_match(self):
        assert resolve_field_name("EMAIL", ["Full_Name", "Email"], KINDS) == "Email"

    def test_normalized_match(self):
        assert resolve_field_name("full name", ["Full_Name", "Email"], KINDS) == "Full_Name"

    def test_single_containment_match(self):
        assert resolve_field_name("mail", ["Full_Name", "Email"], KINDS) == "Email"

    def test_ambiguous_containment_without_preference_is_no_match(self):
        assert resolve_field_name("phone", ["phone_home", "phone_work"], KINDS) is None

    def test_ambiguous_containment_broken_by_preferred_kind(self):
        result = resolve_field_name("phone", ["phone_home", "phone_work"], KINDS, [FieldKind.CHECKBOX])
        assert result == "phone_work"

    def test_ambiguous_containment_with_no_kind_match_is_no_match(self):
        assert resolve_field_name("phone", ["phone_home", "phone_work"], KINDS, [FieldKind.RADIO]) is None

    def test_containment_is_one_directional(self):
        assert resolve_field_name("email_address", ["Email"], KINDS) is None

    def test_punctuation_only_name_does_not_match_everything(self):
        assert resolve_field_name("___", ["Email"], KINDS) is None

    def test_no_candidates(self):
        assert resolve_field_name("anything", [], {}) is None


@pytest.mark.parametrize(
    "field_type, expected",
    [
        (FieldType.CHECKBOX, (FieldKind.CHECKBOX,)),
        (FieldType.RADIO, (FieldKind.RADIO,)),
        (FieldType.SELECT, (FieldKind.DROPDOWN, FieldKind.OPTION_LIST)),
        (FieldType.TEXT, ()),
        (FieldType.DATE, ()),
        (FieldType.EMAIL, ()),
    ],
)
def test_preferred_kinds_for(field_type, expected):
    assert preferred_kinds_for(field_type) == expected


def test_fallback_by_kind_ignores_names():
    available = ["Email", "country_select"]
    assert fallback_by_kind(available, KINDS, (FieldKind.DROPDOWN,)) == "country_select"
    assert fallback_by_kind(available, KINDS, ()) is None


class TestFieldAllocator:
    def test_each_field_is_claimed_once(self):
        allocator = FieldAllocator(["Full_Name", "Email"], KINDS)
        assert allocator.claim(FieldProposal(name="full name")) == "Full_Name"
        assert allocator.claim(FieldProposal(name="Full_Name")) is None
        assert allocator.used == frozenset({"Full_Name"})
        assert allocator.available() == ["Email"]

    def test_kind_fallback_claims_unrelated_name(self):
        allocator = FieldAllocator(["Email", "country_select"], KINDS)
        proposal = FieldProposal(name="nation", field_type=FieldType.SELECT)
        assert allocator.claim(proposal) == "country_select"
        assert allocator.claim(FieldProposal(name="region", field_type=FieldType.SELECT)) is None

    def test_text_proposals_get_no_kind_fallback(self):
        allocator = FieldAllocator(["Email"], KINDS)
        assert allocator.claim(FieldProposal(name="signature_date", bbox=BoundingBox(page=0, x=0.1, y=0.1))) is None
        assert allocator.used == frozenset()

    def test_no_name_is_resolved_twice_across_a_request(self):
        names = ["phone_home", "phone_work", "Email"]
        allocator = FieldAllocator(names, KINDS)
        proposals = [
            FieldProposal(name="phone_home"),
            FieldProposal(name="phone", field_type=FieldType.CHECKBOX),
            FieldProposal(name="phone"),
            FieldProposal(name="email"),
            FieldProposal(name="EMAIL"),
        ]
        claimed = [allocator.claim(proposal) for proposal in proposals]
        resolved = [name for name in claimed if name is not None]
        assert claimed == ["phone_home", "phone_work", None, "Email", None]
        assert len(resolved) == len(set(resolved))


class TestSuggestFieldName:
    def test_suggests_close_name(self):
        assert suggest_field_name("applicant full name", ["Full_Name", "Email"]) == "Full_Name"

    def test_unrelated_names_get_no_suggestion(self):
        assert suggest_field_name("signature", ["Full_Name", "Email"]) is None

    def test_empty_inputs(self):
        assert suggest_field_name("", ["Email"]) is None
        assert suggest_field_name("Email", []) is None
