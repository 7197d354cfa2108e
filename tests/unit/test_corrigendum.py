"""Unit tests for the corrigendum differ."""

import pytest

from eligibility.corrigendum import CORRIGENDUM_FIELDS, diff_fields
from eligibility.models import FieldChange, Tender


@pytest.fixture
def original():
    return {
        "title": "Development of web portal",
        "department": "IT Department",
        "organization": None,
        "estimated_value": "100",
        "emd_amount": "2",
        "turnover_requirement": "200",
        "submission_deadline": "2026-02-23 09:00",
        "opening_date": None,
        "eligibility_criteria": "Turnover Rs. 2 Crore",
        "checklist": "PAN, GST",
    }


@pytest.mark.unit
class TestDiffFields:

    def test_single_changed_field(self, original):
        amended = dict(original, estimated_value="150")
        assert diff_fields(original, amended) == [
            FieldChange(field_name="estimated_value", old_value="100", new_value="150"),
        ]

    def test_identical_records(self, original):
        assert diff_fields(original, dict(original)) == []

    def test_none_and_missing_equal_empty_string(self, original):
        amended = dict(original, organization="")
        del amended["opening_date"]
        assert diff_fields(original, amended) == []

    def test_values_compared_as_strings(self, original):
        assert diff_fields(original, dict(original, estimated_value=100)) == []
        changes = diff_fields(original, dict(original, estimated_value=100.0))
        assert [c.new_value for c in changes] == ["100.0"]

    def test_changes_follow_field_order(self, original):
        amended = dict(original, checklist="PAN", title="Development of portal")
        assert [c.field_name for c in diff_fields(original, amended)] == ["title", "checklist"]

    def test_fields_outside_list_ignored(self, original):
        amended = dict(original, similar_category="IT Services", tender_id="X")
        assert diff_fields(original, amended) == []

    def test_works_on_tender_objects(self):
        old = Tender(tender_id="T1", title="Portal", emd_amount="5")
        new = Tender(tender_id="T1", title="Portal", emd_amount=None)
        changes = diff_fields(old, new)
        assert changes == [FieldChange("emd_amount", "5", "")]

    def test_field_list(self):
        assert len(CORRIGENDUM_FIELDS) == 10
        assert "estimated_value" in CORRIGENDUM_FIELDS
