"""
Excel exporter — writes analysed tenders to a formatted .xlsx file.

The workbook has three sheets:
  1. "Eligible Tenders"     — eligible tenders at or above the minimum score
  2. "All Tenders"          — every tender analysed in this run
  3. "Corrigendum Changes"  — one row per changed field of a re-issued tender

Colour scheme (fill colour in the Status column):
  eligible:       Green
  not_eligible:   Amber
  not_relevant:   Grey
  manual_review:  Blue
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List

import openpyxl
from openpyxl.styles import (
    Alignment,
    Border,
    Font,
    PatternFill,
    Side,
)
from openpyxl.utils import get_column_letter

from eligibility.models import EligibilityStatus, Tender
import config

logger = logging.getLogger(__name__)

# ── Styles ────────────────────────────────────────────────────────────────────
FILL_ELIGIBLE     = PatternFill("solid", fgColor="1A7A3C")   # Dark green
FILL_NOT_ELIGIBLE = PatternFill("solid", fgColor="FFC107")   # Amber
FILL_NOT_RELEVANT = PatternFill("solid", fgColor="B0BEC5")   # Grey
FILL_MANUAL       = PatternFill("solid", fgColor="3F72AF")   # Blue
FILL_HEADER       = PatternFill("solid", fgColor="1B3A6B")   # Navy blue header
FILL_ALT_ROW      = PatternFill("solid", fgColor="F0F4FF")   # Light blue alt row

FONT_HEADER  = Font(name="Calibri", bold=True, color="FFFFFF", size=10)
FONT_TITLE   = Font(name="Calibri", bold=True, color="263238", size=10)
FONT_BODY    = Font(name="Calibri", size=9)
FONT_STATUS  = Font(name="Calibri", bold=True, color="FFFFFF", size=10)

_GRID = Side(style="thin", color="CFD8DC")
THIN_BORDER = Border(left=_GRID, right=_GRID, top=_GRID, bottom=_GRID)

_STATUS_FILLS = {
    EligibilityStatus.ELIGIBLE: FILL_ELIGIBLE,
    EligibilityStatus.NOT_ELIGIBLE: FILL_NOT_ELIGIBLE,
    EligibilityStatus.NOT_RELEVANT: FILL_NOT_RELEVANT,
    EligibilityStatus.MANUAL_REVIEW: FILL_MANUAL,
}


def _match_attr(name):
    return lambda t: getattr(t.match, name) if t.match else None


COLUMN_DEFS = [
    # (header,                width, getter)
    ("#",                     5,     None),
    ("Match %",               9,     _match_attr("match_percentage")),
    ("Status",                15,    lambda t: t.match.eligibility_status.value if t.match else None),
    ("Tender ID",             22,    lambda t: t.tender_id),
    ("Type",                  9,     lambda t: "GeM" if t.tender_type == "gem" else "Non-GeM"),
    ("Title",                 48,    lambda t: t.title),
    ("Department",            28,    lambda t: t.department),
    ("Turnover Required",     18,    lambda t: t.display_turnover()),
    ("Turnover OK?",          12,    _match_attr("turnover_met")),
    ("MSME Exempt",           11,    _match_attr("is_msme_exempted")),
    ("Startup Exempt",        12,    _match_attr("is_startup_exempted")),
    ("Tags",                  30,    _match_attr("tags")),
    ("Not Relevant Keyword",  20,    _match_attr("not_relevant_keyword")),
    ("Corrigendum",           12,    lambda t: t.is_corrigendum),
    ("Deadline",              18,    lambda t: t.submission_deadline),
]

CHANGE_COLUMN_DEFS = [
    ("Tender ID", 22),
    ("Field",     24),
    ("Old Value", 48),
    ("New Value", 48),
]


def _display(val):
    if isinstance(val, (list, tuple)):
        return ", ".join(str(v) for v in val)
    if isinstance(val, bool):
        return "✓" if val else "✗"
    if val is None:
        return "—"
    return val


def _write_title(ws, title: str, run_date: str, n_cols: int, n_rows: int) -> None:
    ws.merge_cells(f"A1:{get_column_letter(n_cols)}1")
    banner = ws.cell(row=1, column=1, value=f"{title}  |  Run: {run_date}  |  {n_rows} row(s)")
    banner.font = Font(name="Calibri", bold=True, size=12, color="263238")
    banner.alignment = Alignment(horizontal="left", vertical="center")
    ws.row_dimensions[1].height = 22


def _write_header(ws, headers) -> None:
    for col_idx, (header, width) in enumerate(headers, start=1):
        cell = ws.cell(row=2, column=col_idx, value=header)
        cell.font = FONT_HEADER
        cell.fill = FILL_HEADER
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        cell.border = THIN_BORDER
        ws.column_dimensions[get_column_letter(col_idx)].width = width
    ws.row_dimensions[2].height = 30


_WRAPPED = ("Title", "Department", "Tags")


def _body_cell(ws, row: int, column: int, value, wrap: bool = False):
    cell = ws.cell(row=row, column=column, value=value)
    cell.border = THIN_BORDER
    cell.font = FONT_BODY
    cell.alignment = Alignment(vertical="center", wrap_text=wrap)
    return cell


def _write_sheet(
    ws,
    tenders: List[Tender],
    title: str,
    run_date: str,
) -> None:
    """Title row, header row, then one row per tender starting at row 3."""
    _write_title(ws, title, run_date, len(COLUMN_DEFS), len(tenders))
    _write_header(ws, [(h, w) for h, w, _ in COLUMN_DEFS])

    for row_idx, tender in enumerate(tenders, start=1):
        excel_row = 2 + row_idx

        for col_idx, (header, _, getter) in enumerate(COLUMN_DEFS, start=1):
            value = row_idx if getter is None else _display(getter(tender))

            cell = _body_cell(ws, excel_row, col_idx, value, wrap=header in _WRAPPED)
            if header == "Status" and tender.match:
                cell.fill = _STATUS_FILLS[tender.match.eligibility_status]
                cell.font = FONT_STATUS
                cell.alignment = Alignment(horizontal="center", vertical="center")
            elif row_idx % 2 == 0:
                cell.fill = FILL_ALT_ROW
            if header == "Title":
                cell.font = FONT_TITLE

        ws.row_dimensions[excel_row].height = 32

    # header stays visible while scrolling
    ws.freeze_panes = "A3"
    ws.auto_filter.ref = f"A2:{get_column_letter(len(COLUMN_DEFS))}{len(tenders) + 2}"


def _write_changes(ws, tenders: List[Tender], run_date: str) -> None:
    rows = [(t.tender_id, c) for t in tenders for c in t.changes]
    _write_title(ws, "Corrigendum Changes", run_date, len(CHANGE_COLUMN_DEFS), len(rows))
    _write_header(ws, CHANGE_COLUMN_DEFS)

    for row_idx, (tender_id, change) in enumerate(rows, start=3):
        values = (tender_id, change.field_name, change.old_value, change.new_value)
        for col_idx, value in enumerate(values, start=1):
            _body_cell(ws, row_idx, col_idx, value, wrap=col_idx > 2)

    ws.freeze_panes = "A3"


def export_to_excel(
    eligible: List[Tender],
    all_tenders: List[Tender],
    output_dir: str = None,
) -> str:
    """
    Write the three-sheet Excel file and return the file path.

    Args:
        eligible:    Tenders for the Eligible Tenders sheet.
        all_tenders: Every analysed tender (also the source of corrigendum rows).
        output_dir:  Directory to save the file. Defaults to config.OUTPUT_DIR.

    Returns:
        Absolute path of the saved .xlsx file.
    """
    out_dir = Path(output_dir or config.OUTPUT_DIR)
    out_dir.mkdir(parents=True, exist_ok=True)

    now = datetime.now()
    run_date = now.strftime("%d %b %Y %H:%M")
    filepath = (out_dir / config.OUTPUT_FILENAME.format(date=now.strftime("%Y-%m-%d"))).resolve()

    wb = openpyxl.Workbook()
    wb.remove(wb.active)

    _write_sheet(wb.create_sheet("Eligible Tenders"), eligible, "Eligible Tenders — Best Opportunities", run_date)
    _write_sheet(wb.create_sheet("All Tenders"), all_tenders, "All Analysed Tenders", run_date)
    _write_changes(wb.create_sheet("Corrigendum Changes"), all_tenders, run_date)

    wb.save(filepath)
    logger.info(
        "Report written: %s (%d eligible of %d).", filepath, len(eligible), len(all_tenders),
    )
    return str(filepath)
