"""Priced estimate to Excel export."""

import io
from typing import Any, Dict, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from ..estimate.compiler import EstimateLedger

FEATURES_SHEET = "Fonctionnalités"
ROLES_SHEET = "Rôles utilisateurs"
SUMMARY_SHEET = "Récapitulatif"

PRIMARY = "1B4F72"
HEADER = "2C3E50"
SUBTOTAL = "EBF5FB"
ALT_ROW = "F8F9FA"
WHITE = "FFFFFF"
MUTED = "7F8C8D"

CURRENCY = '#,##0.00 "€"'
NUMBER = '#,##0.00'

_THIN = Side(style="thin", color="BDC3C7")
_BORDER = Border(top=_THIN, left=_THIN, bottom=_THIN, right=_THIN)

# (header, feature row key, width)
FEATURE_COLUMNS = [
    ("Section", "section", 28),
    ("Fonctionnalité", "feature", 40),
    ("Rôle", "role", 20),
    ("Jours estimés", "days", 16),
    ("Complexité", "complexity", 14),
    ("Total Jours", "total_days", 14),
    ("Total Prix (€)", "total_price", 18),
    ("Commentaire", "comment", 35),
]


def _fill(color: str) -> PatternFill:
    return PatternFill(fill_type="solid", start_color=color, end_color=color)


def _set_widths(ws: Worksheet, widths: Sequence[int]) -> None:
    for i, width in enumerate(widths):
        ws.column_dimensions[chr(ord("A") + i)].width = width


def _style_row(ws: Worksheet, row: int, columns: int, kind: str, alt: bool = False) -> None:
    for col in range(1, columns + 1):
        cell = ws.cell(row=row, column=col)
        cell.border = _BORDER
        if kind == "header":
            cell.font = Font(bold=True, color=WHITE, size=11)
            cell.fill = _fill(HEADER)
            cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        elif kind == "subtotal":
            cell.font = Font(bold=True, color=PRIMARY, size=10)
            cell.fill = _fill(SUBTOTAL)
        elif kind == "total":
            cell.font = Font(bold=True, color=WHITE, size=12)
            cell.fill = _fill(PRIMARY)
            cell.alignment = Alignment(vertical="center")
        else:
            cell.font = Font(size=10)
            cell.alignment = Alignment(vertical="center", wrap_text=True)
            if alt:
                cell.fill = _fill(ALT_ROW)


def _write_features(ws: Worksheet, rows: List[Dict[str, Any]]) -> None:
    ws.append([header for header, _, _ in FEATURE_COLUMNS])
    _style_row(ws, 1, len(FEATURE_COLUMNS), "header")
    _set_widths(ws, [width for _, _, width in FEATURE_COLUMNS])
    ws.freeze_panes = "A2"
    ws.auto_filter.ref = f"A1:{chr(ord('A') + len(FEATURE_COLUMNS) - 1)}1"

    section_number = 0
    for row in rows:
        if row["kind"] == "total":
            ws.append([])
        ws.append(["" if row.get(key) is None else row[key] for _, key, _ in FEATURE_COLUMNS])

        index = ws.max_row
        _style_row(ws, index, len(FEATURE_COLUMNS), row["kind"], alt=section_number % 2 == 1)
        if row["kind"] == "subtotal":
            section_number += 1

        for col in (4, 5, 6):
            ws.cell(row=index, column=col).number_format = NUMBER
        ws.cell(row=index, column=7).number_format = CURRENCY


def _write_roles(ws: Worksheet, roles: List[Dict[str, str]]) -> None:
    ws.append(["Rôle", "Description"])
    _style_row(ws, 1, 2, "header")
    _set_widths(ws, [25, 65])

    for i, role in enumerate(roles):
        ws.append([role["role"], role["description"]])
        _style_row(ws, ws.max_row, 2, "data", alt=i % 2 == 1)
        ws.cell(row=ws.max_row, column=1).font = Font(bold=True, size=10)


def _summary_line(ws: Worksheet, label: str, days: Optional[float], amount: float, kind: str) -> None:
    ws.append([label, "" if days is None else days, amount])
    _style_row(ws, ws.max_row, 3, kind)
    ws.cell(row=ws.max_row, column=2).number_format = NUMBER
    ws.cell(row=ws.max_row, column=3).number_format = CURRENCY


def _write_summary(ws: Worksheet, summary: Dict[str, Any]) -> None:
    _set_widths(ws, [35, 18, 20])

    ws.append(["RÉCAPITULATIF DU CHIFFRAGE"])
    ws.merge_cells("A1:C1")
    title = ws["A1"]
    title.font = Font(bold=True, size=16, color=WHITE)
    title.fill = _fill(PRIMARY)
    title.alignment = Alignment(horizontal="center", vertical="center")
    ws.row_dimensions[1].height = 36

    ws.append([])
    ws.append(["TJM (€/jour)", summary["daily_rate"]])
    ws.cell(row=ws.max_row, column=1).font = Font(bold=True, size=11)
    rate = ws.cell(row=ws.max_row, column=2)
    rate.font = Font(bold=True, size=14, color=PRIMARY)
    rate.number_format = '#,##0 "€"'

    ws.append([])
    ws.append(["Section", "Total Jours", "Total HT (€)"])
    _style_row(ws, ws.max_row, 3, "header")
    for i, section in enumerate(summary["sections"]):
        ws.append([section["section"], section["total_days"], section["total_price"]])
        _style_row(ws, ws.max_row, 3, "data", alt=i % 2 == 1)
        ws.cell(row=ws.max_row, column=2).number_format = NUMBER
        ws.cell(row=ws.max_row, column=3).number_format = CURRENCY

    ws.append([])
    _summary_line(ws, "Total HT", summary["total_days"], summary["total_excl_tax"], "subtotal")
    _summary_line(ws, "GDP (20%)", None, summary["overhead"], "data")
    _summary_line(ws, "Total HT + GDP", None, summary["total_with_markup"], "subtotal")
    _summary_line(ws, "TVA (20%)", None, summary["tax"], "data")
    _summary_line(ws, "TOTAL TTC", None, summary["total_with_tax"], "total")
    ws.cell(row=ws.max_row, column=3).font = Font(bold=True, size=14, color=WHITE)

    ws.append([])
    for label, value in (
        ("Total Jours-homme", summary["total_days"]),
        ("Nombre de sections", summary["section_count"]),
        ("Nombre de fonctionnalités", summary["feature_count"]),
        ("Nombre de rôles", summary["role_count"]),
    ):
        ws.append([label, value])
        ws.cell(row=ws.max_row, column=1).font = Font(size=10, color=MUTED)
        stat = ws.cell(row=ws.max_row, column=2)
        stat.font = Font(bold=True, size=10)
        stat.alignment = Alignment(horizontal="center")


def ledger_to_xlsx(ledger: EstimateLedger) -> bytes:
    """
    Render a priced estimate as an Excel workbook.

    The workbook has one worksheet per ledger sheet: features (with
    section subtotals and the grand total), roles, and the summary with
    overhead and tax.

    Returns:
        .xlsx bytes
    """
    wb = Workbook()
    features = wb.active
    features.title = FEATURES_SHEET
    _write_features(features, ledger.features_sheet())
    _write_roles(wb.create_sheet(ROLES_SHEET), ledger.roles_sheet())
    _write_summary(wb.create_sheet(SUMMARY_SHEET), ledger.summary_sheet())

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
