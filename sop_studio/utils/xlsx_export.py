"""Excel checklist rendering of an SOP's procedure steps."""

from __future__ import annotations

import io
import logging
import math
from typing import Any, List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from sop_studio.errors import ExportError
from sop_studio.utils.sop_content import SOPContent, load_content

logger = logging.getLogger(__name__)

SHEET_TITLE = "SOP Checklist"
COLUMN_WIDTHS = [10, 40, 50, 12, 30]
HEADER_VALUES = ["Step #", "Action", "Details", "Completed ✓", "Notes"]

TITLE_FILL = PatternFill(fill_type="solid", fgColor="FF4472C4")
HEADER_FILL = PatternFill(fill_type="solid", fgColor="FF70AD47")
SAFETY_FILL = PatternFill(fill_type="solid", fgColor="FFFFEB9C")
CRITERIA_FILL = PatternFill(fill_type="solid", fgColor="FFD9E1F2")

WHITE_BOLD = Font(bold=True, color="FFFFFFFF")
WARNING_FONT = Font(color="FFFF0000")
META_FONT = Font(size=10, italic=True)
BLOCK_HEADER_FONT = Font(bold=True, size=12)

_thin = Side(style="thin")
CELL_BORDER = Border(top=_thin, left=_thin, bottom=_thin, right=_thin)

CENTER = Alignment(vertical="center", horizontal="center")
TOP_CENTER = Alignment(vertical="top", horizontal="center")
TOP_WRAP = Alignment(vertical="top", horizontal="left", wrap_text=True)

LAST_COLUMN = get_column_letter(len(COLUMN_WIDTHS))


def _merged_row(ws, row: int, value: str):
    ws.merge_cells(f"A{row}:{LAST_COLUMN}{row}")
    return ws.cell(row=row, column=1, value=value)


def _bullet_block(ws, row: int, heading: str, fill: PatternFill, items: List[str]) -> int:
    header = _merged_row(ws, row, heading)
    header.font = BLOCK_HEADER_FONT
    header.fill = fill
    row += 1
    for item in items:
        cell = _merged_row(ws, row, f"• {item}")
        cell.alignment = TOP_WRAP
        row += 1
    return row


def step_row_height(details: str | None) -> int:
    return max(20, math.ceil((len(details) if details else 50) / 50) * 15)


def generate_xlsx(sop: Any) -> bytes:
    try:
        raw = load_content(sop.content)
        content = SOPContent.from_dict(raw) if isinstance(raw, dict) else SOPContent()

        wb = Workbook()
        ws = wb.active
        ws.title = SHEET_TITLE
        for idx, width in enumerate(COLUMN_WIDTHS, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = width

        title = _merged_row(ws, 1, sop.title or "Standard Operating Procedure")
        title.font = Font(size=16, bold=True, color="FFFFFFFF")
        title.fill = TITLE_FILL
        title.alignment = CENTER
        ws.row_dimensions[1].height = 30

        row = 2
        meta = _merged_row(
            ws,
            row,
            f"Document ID: {sop.id} | Version: {sop.version or '1.0'} | "
            f"Status: {(sop.status or 'draft').upper()}",
        )
        meta.font = META_FONT
        meta.alignment = CENTER
        row += 1

        extra: List[str] = []
        if sop.category:
            extra.append(f"Category: {sop.category}")
        if sop.industry:
            extra.append(f"Industry: {sop.industry}")
        if sop.regulatory_framework:
            extra.append(f"Frameworks: {sop.regulatory_framework}")
        if extra:
            cell = _merged_row(ws, row, " | ".join(extra))
            cell.font = META_FONT
            cell.alignment = CENTER
            row += 1

        row += 1
        for col, value in enumerate(HEADER_VALUES, start=1):
            cell = ws.cell(row=row, column=col, value=value)
            cell.font = WHITE_BOLD
            cell.fill = HEADER_FILL
            cell.alignment = CENTER
        ws.row_dimensions[row].height = 25
        row += 1

        for step in content.procedures:
            values = [
                step.step,
                step.action,
                step.details or "",
                "",
                f"⚠ {step.warning}" if step.warning else "",
            ]
            for col, value in enumerate(values, start=1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = CELL_BORDER
                cell.alignment = TOP_WRAP
            ws.cell(row=row, column=1).alignment = TOP_CENTER
            ws.cell(row=row, column=4).alignment = CENTER
            if step.warning:
                ws.cell(row=row, column=5).font = WARNING_FONT
            ws.row_dimensions[row].height = step_row_height(step.details)
            row += 1

        row += 1
        if content.safety_notes:
            row = _bullet_block(ws, row, "SAFETY NOTES", SAFETY_FILL, content.safety_notes) + 1
        if content.acceptance_criteria:
            _bullet_block(ws, row, "ACCEPTANCE CRITERIA", CRITERIA_FILL, content.acceptance_criteria)

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()
    except Exception as exc:
        logger.exception("Error generating XLSX for SOP %s", getattr(sop, "id", "?"))
        raise ExportError("Excel", "Failed to generate Excel document") from exc


__all__ = ["generate_xlsx", "step_row_height"]
