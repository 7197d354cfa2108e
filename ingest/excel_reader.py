"""
Excel tender reader — turns an exported tender workbook into Tender objects.

Sheet handling:
  * A sheet whose name contains "gem" (but not "non") is a GeM sheet; every
    other sheet is non-GeM.
  * GeM sheets carry a few facts at fixed columns:
        K  — MSME exemption (Yes/No)
        L  — Startup exemption (Yes/No)
        S  — Minimum average annual turnover, in Lakh(s)
        X  — Similar Category (core-service label)
        AU — Eligibility criteria
  * Non-GeM sheets keep eligibility criteria in column N.
  * Everything else is found by header name, exact first, then partial.

Rows that fail to parse are logged and counted; the rest of the workbook is
still read.
"""

import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Tuple

import openpyxl
from openpyxl.utils import column_index_from_string

from eligibility.models import Tender

logger = logging.getLogger(__name__)

GEM_COLUMNS = {
    "msme_exemption": "K",
    "startup_exemption": "L",
    "turnover": "S",
    "similar_category": "X",
    "eligibility_criteria": "AU",
}
NON_GEM_ELIGIBILITY_COLUMN = "N"

# Header aliases, tried in order.
COLUMN_ALIASES = {
    "tender_id": ["t247id", "id", "tenderid", "tenderno", "tendernumber", "refno", "referenceno"],
    "reference_no": ["referenceno", "refno", "refrno", "reference", "referanceno"],
    "title": ["title", "tendertitle", "name", "subject", "work", "description", "tenderbrief", "brief"],
    "department": ["department", "dept", "ministry"],
    "organization": ["organization", "org", "company", "buyer", "buyerorg"],
    "estimated_value": ["estimatedvalue", "value", "amount", "budget", "cost", "estimatedcost", "tendervalue"],
    "emd_amount": ["emd", "emdamount", "earnestmoney", "earnestmoneydeposit", "emdr", "bidsecurity"],
    "turnover": ["turnover", "turnoverrequirement", "annualturnover", "minturnover"],
    "submission_deadline": ["submissiondeadline", "deadline", "duedate", "bidenddate", "closingdate",
                            "lastdate", "bidsubmissionenddate"],
    "opening_date": ["openingdate", "bidopeningdate", "opendate", "bidopeningdatetime"],
    "eligibility_criteria": ["eligibilitycriteria", "eligibility", "criteria", "qualification",
                             "requirements", "qr", "qualifyingcriteria"],
    "checklist": ["checklist", "documents", "requireddocuments", "doclist", "documentlist"],
    "msme_exemption": ["msmeexemption", "msme", "msmeexempted"],
    "startup_exemption": ["startupexemption", "startup", "startupexempted"],
}

EXEMPTION_YES_VALUES = {"yes", "y", "true", "1", "exempted", "applicable"}

_DATE_FMTS = [
    "%d-%m-%Y %I:%M %p",
    "%d-%m-%Y %H:%M",
    "%d-%b-%Y %I:%M %p",
    "%d-%b-%Y %H:%M",
    "%d/%m/%Y %I:%M %p",
    "%d/%m/%Y %H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%d-%b-%Y",
    "%d/%m/%Y",
    "%d-%m-%Y",
]


@dataclass
class ReadStats:
    gem_count: int = 0
    non_gem_count: int = 0
    failed_count: int = 0
    sheets: List[str] = field(default_factory=list)


# ── Cell parsing ──────────────────────────────────────────────────────────────

def normalize_column_name(name) -> str:
    return re.sub(r"[^a-z0-9]", "", str(name).lower())


def is_gem_sheet(sheet_name: str) -> bool:
    normalised = re.sub(r"[-_\s]", "", sheet_name.lower())
    return "gem" in normalised and "non" not in normalised


def parse_exemption_cell(value) -> bool:
    """Only explicit positive values count ("Yes", "Y", "Exempted", ...)."""
    if value is None or value == "":
        return False
    return str(value).strip().lower() in EXEMPTION_YES_VALUES


def parse_lakh_cell(value) -> Optional[str]:
    """
    "15000 Lakh(s)" -> "15000"; a plain number is taken as Lakhs already.
    Returns a decimal string or None.
    """
    if value is None or value == "":
        return None
    text = str(value).strip().lower().replace(",", "")
    match = re.search(r"(\d+(?:\.\d+)?)\s*(?:lakh|lac)", text) or re.search(r"(\d+(?:\.\d+)?)", text)
    if not match:
        return None
    return match.group(1)


def parse_number(value) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    cleaned = re.sub(r"[₹$,\s]", "", str(value))
    match = re.match(r"-?\d+(?:\.\d+)?", cleaned)
    if not match:
        return None
    try:
        return str(Decimal(match.group(0)))
    except InvalidOperation:
        return None


def parse_date(value) -> Optional[str]:
    """Normalise a date cell to "YYYY-MM-DD HH:MM"; None if unreadable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d 00:00")
    raw = str(value).strip()
    for fmt in _DATE_FMTS:
        try:
            return datetime.strptime(raw, fmt).strftime("%Y-%m-%d %H:%M")
        except ValueError:
            continue
    return None


def _text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


# ── Row lookup ────────────────────────────────────────────────────────────────

def find_column(row: Dict[str, object], *names: str):
    """Value of the first header matching one of names (exact, then partial)."""
    wanted = [normalize_column_name(n) for n in names]
    keyed = [(normalize_column_name(k), v) for k, v in row.items() if k is not None]

    for key, value in keyed:
        if key in wanted:
            return value
    for key, value in keyed:
        if not key:
            continue
        if any(w in key or key in w for w in wanted):
            return value
    return None


def _lookup(row: Dict[str, object], concept: str):
    return find_column(row, *COLUMN_ALIASES[concept])


def _by_letter(cells: Tuple, letter: str):
    idx = column_index_from_string(letter) - 1
    return cells[idx] if idx < len(cells) else None


def parse_row(row: Dict[str, object], cells: Tuple, tender_type: str) -> Tender:
    """Build a Tender from one sheet row (header→value dict plus raw cells)."""
    tender_id = _text(_lookup(row, "tender_id")) or f"AUTO-{uuid.uuid4().hex[:12]}"

    reference_no = _text(_lookup(row, "reference_no"))
    brief = _text(_lookup(row, "title"))
    if reference_no and brief:
        title = f"[{reference_no}] {brief}"
    elif reference_no:
        title = f"[{reference_no}]"
    else:
        title = brief or ""

    similar_category = None
    if tender_type == "gem":
        msme_raw = _by_letter(cells, GEM_COLUMNS["msme_exemption"])
        startup_raw = _by_letter(cells, GEM_COLUMNS["startup_exemption"])
        turnover = parse_lakh_cell(_by_letter(cells, GEM_COLUMNS["turnover"]))
        similar_category = _text(_by_letter(cells, GEM_COLUMNS["similar_category"]))
        eligibility = _text(_by_letter(cells, GEM_COLUMNS["eligibility_criteria"]))
    else:
        msme_raw = _lookup(row, "msme_exemption")
        startup_raw = _lookup(row, "startup_exemption")
        turnover = parse_number(_lookup(row, "turnover"))
        eligibility = _text(_by_letter(cells, NON_GEM_ELIGIBILITY_COLUMN))

    if not eligibility:
        eligibility = _text(_lookup(row, "eligibility_criteria"))

    return Tender(
        tender_id=tender_id,
        tender_type=tender_type,
        title=title,
        department=_text(_lookup(row, "department")),
        organization=_text(_lookup(row, "organization")),
        estimated_value=parse_number(_lookup(row, "estimated_value")),
        emd_amount=parse_number(_lookup(row, "emd_amount")),
        turnover_requirement=turnover,
        submission_deadline=parse_date(_lookup(row, "submission_deadline")),
        opening_date=parse_date(_lookup(row, "opening_date")),
        eligibility_criteria=eligibility,
        checklist=_text(_lookup(row, "checklist")),
        similar_category=similar_category,
        msme_exemption_flag=parse_exemption_cell(msme_raw),
        startup_exemption_flag=parse_exemption_cell(startup_raw),
    )


# ── Workbook ──────────────────────────────────────────────────────────────────

def read_tenders(path: str) -> Tuple[List[Tender], ReadStats]:
    """
    Read every sheet of the workbook at path.

    Returns:
        (tenders in sheet/row order, ReadStats)
    """
    stats = ReadStats()
    tenders: List[Tender] = []

    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        for ws in wb.worksheets:
            tender_type = "gem" if is_gem_sheet(ws.title) else "non_gem"
            stats.sheets.append(ws.title)
            rows = ws.iter_rows(values_only=True)
            header = next(rows, None)
            if not header:
                logger.info("Sheet %r is empty — skipped.", ws.title)
                continue

            for excel_row, cells in enumerate(rows, start=2):
                if not any(c not in (None, "") for c in cells):
                    continue
                try:
                    row = {h: v for h, v in zip(header, cells) if h is not None}
                    tenders.append(parse_row(row, cells, tender_type))
                except Exception as exc:
                    stats.failed_count += 1
                    logger.warning(
                        "Sheet %r row %d could not be read: %s", ws.title, excel_row, exc,
                    )
                    continue
                if tender_type == "gem":
                    stats.gem_count += 1
                else:
                    stats.non_gem_count += 1
    finally:
        wb.close()

    logger.info(
        "Read %d tender(s) from %s (GeM %d, non-GeM %d, failed %d).",
        len(tenders), path, stats.gem_count, stats.non_gem_count, stats.failed_count,
    )
    return tenders, stats
