"""Shared fixtures for the eligibility engine tests."""

from decimal import Decimal

import openpyxl
import pytest
from openpyxl.utils import column_index_from_string

from eligibility.models import CompanyPolicy, NegativeKeyword


@pytest.fixture
def policy():
    """Default company: 400 Lakh turnover, the five core project types."""
    return CompanyPolicy()


@pytest.fixture
def negative_keywords():
    return [
        NegativeKeyword("laptop", "Hardware supply"),
        NegativeKeyword("printer", "Hardware supply"),
        NegativeKeyword("furniture", "Office furniture"),
    ]


@pytest.fixture
def small_company():
    return CompanyPolicy(turnover_lakhs=Decimal("50"), project_types=frozenset({"Software"}))


def _put(ws, row, letter, value):
    ws.cell(row=row, column=column_index_from_string(letter), value=value)


@pytest.fixture
def tender_workbook(tmp_path):
    """A two-sheet export: GeM (fixed columns) and Non-GeM (named headers)."""
    wb = openpyxl.Workbook()

    gem = wb.active
    gem.title = "GeM Bids"
    headers = {
        "A": "Tender ID", "B": "Title", "C": "Department", "D": "Estimated Value",
        "E": "Submission Deadline", "K": "MSME Exemption", "L": "Startup Exemption",
        "S": "Minimum Turnover", "X": "Similar Category", "AU": "Eligibility",
    }
    for letter, header in headers.items():
        _put(gem, 1, letter, header)

    rows = [
        ("GEM/2025/B/1001", "₹ 25,00,000"),
        ("GEM/2025/B/1001", "₹ 30,00,000"),   # re-issued with a new value
    ]
    for r, (tender_id, value) in enumerate(rows, start=2):
        _put(gem, r, "A", tender_id)
        _put(gem, r, "B", "Development of web portal for district administration")
        _put(gem, r, "C", "District Collectorate")
        _put(gem, r, "D", value)
        _put(gem, r, "E", "23-02-2026 9:00 AM")
        _put(gem, r, "K", "Yes")
        _put(gem, r, "L", "No")
        _put(gem, r, "S", "300 Lakh(s)")
        _put(gem, r, "X", "IT Services")
        _put(gem, r, "AU", "Average annual turnover of Rs. 3 Crore. MSME exempted as per rules.")

    non_gem = wb.create_sheet("Non-GeM")
    non_gem.append(["Reference No", "Tender Brief", "Organization",
                    "Eligibility Criteria", "MSME Exemption", "Turnover"])
    non_gem.append(["REF-9", "Supply of laptops", "State Bank", "OEM authorisation", "exempted", 150])
    non_gem.append([None, None, None, None, None, None])

    path = tmp_path / "tenders.xlsx"
    wb.save(path)
    return path
