"""
Corrigendum differ — field-by-field comparison of two versions of a tender
that share the same external ID.
"""

from collections.abc import Mapping
from typing import Any, List

from eligibility.models import FieldChange

CORRIGENDUM_FIELDS = [
    "title",
    "department",
    "organization",
    "estimated_value",
    "emd_amount",
    "turnover_requirement",
    "submission_deadline",
    "opening_date",
    "eligibility_criteria",
    "checklist",
]


def _field(record: Any, name: str) -> str:
    if isinstance(record, Mapping):
        value = record.get(name)
    else:
        value = getattr(record, name, None)
    return "" if value is None else str(value)


def diff_fields(old_record: Any, new_record: Any) -> List[FieldChange]:
    """
    Return one FieldChange per field whose string form differs.

    Records may be dicts or objects with matching attributes. No numeric
    or date normalisation: "100" and "100.0" are a change.
    """
    changes = []
    for name in CORRIGENDUM_FIELDS:
        old_value = _field(old_record, name)
        new_value = _field(new_record, name)
        if old_value != new_value:
            changes.append(FieldChange(field_name=name, old_value=old_value, new_value=new_value))
    return changes
