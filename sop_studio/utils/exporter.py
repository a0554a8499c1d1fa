"""Utilities for exporting stored SOPs to Word and PDF documents."""

from __future__ import annotations

import io
import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Tuple
from xml.sax.saxutils import escape

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt, RGBColor
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from sop_studio.errors import ExportError
from sop_studio.utils.sop_content import SECTION_ORDER, SOPContent, is_structured, load_content

logger = logging.getLogger(__name__)

WARNING_RED = RGBColor(0xFF, 0x00, 0x00)
BULLET_INDENT = Pt(20)

_FONT_CACHE: tuple[str, str] | None = None


# ------------------------------------------------------------ shared helpers


def format_date(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return f"{value.month}/{value.day}/{value.year}"


def metadata_rows(sop: Any) -> List[Tuple[str, str]]:
    """Label/value pairs shown in every export header, optional rows only when set."""
    rows: List[Tuple[str, str]] = [
        ("Document ID:", str(sop.id or "")),
        ("Version:", str(sop.version or "1.0")),
        ("Status:", (sop.status or "draft").upper()),
    ]
    if sop.category:
        rows.append(("Category:", sop.category))
    if sop.industry:
        rows.append(("Industry:", sop.industry))
    if sop.regulatory_framework:
        rows.append(("Regulatory Framework:", sop.regulatory_framework))
    if sop.effective_date:
        rows.append(("Effective Date:", format_date(sop.effective_date)))
    if sop.created_at:
        rows.append(("Created:", format_date(sop.created_at)))
    if sop.updated_at:
        rows.append(("Last Updated:", format_date(sop.updated_at)))
    return rows


def export_filename(sop: Any, extension: str, suffix: str = "") -> str:
    safe_title = re.sub(r"[^a-z0-9]", "_", sop.title or "sop", flags=re.IGNORECASE).lower()[:50]
    return f"{safe_title}{suffix}_v{sop.version or '1.0'}.{extension}"


def structured_content(sop: Any) -> Tuple[Optional[SOPContent], Any]:
    """Return the parsed SOP tree (or None when the content is free-form) plus the raw JSON value."""
    raw = load_content(sop.content)
    if is_structured(raw):
        return SOPContent.from_dict(raw), raw
    return None, raw


# ---------------------------------------------------------------------- DOCX


def _bullet(document: Document, text: str) -> None:
    p = document.add_paragraph(f"• {text}")
    p.paragraph_format.left_indent = BULLET_INDENT
    p.paragraph_format.space_after = Pt(5)


def _section_heading(document: Document, number: int, title: str) -> None:
    heading = document.add_heading(f"{number}. {title}", level=2)
    heading.paragraph_format.space_before = Pt(20)
    heading.paragraph_format.space_after = Pt(10)


def _write_metadata_table(document: Document, sop: Any) -> None:
    rows = metadata_rows(sop)
    table = document.add_table(rows=0, cols=2)
    try:
        table.style = "Table Grid"
    except (KeyError, ValueError):
        logger.debug("Table Grid style unavailable; metadata table left unstyled")
    for label, value in rows:
        cells = table.add_row().cells
        cells[0].width = Inches(1.95)
        cells[1].width = Inches(4.55)
        label_par = cells[0].paragraphs[0]
        label_par.add_run(label).bold = True
        cells[1].paragraphs[0].add_run(value)


def _write_sections(document: Document, content: SOPContent) -> None:
    for number, (title, attr, _key) in enumerate(SECTION_ORDER, start=1):
        value = getattr(content, attr)
        if not value:
            continue
        _section_heading(document, number, title)

        if attr in ("purpose", "scope"):
            document.add_paragraph(value).paragraph_format.space_after = Pt(15)
            continue

        if attr == "procedures":
            for step in value:
                head = document.add_paragraph()
                head.paragraph_format.space_before = Pt(10)
                head.add_run(f"Step {step.step}: {step.action}").bold = True
                if step.details:
                    details = document.add_paragraph(step.details)
                    details.paragraph_format.left_indent = BULLET_INDENT
                if step.warning:
                    warning = document.add_paragraph()
                    warning.paragraph_format.left_indent = BULLET_INDENT
                    label = warning.add_run("⚠ WARNING: ")
                    label.bold = True
                    label.font.color.rgb = WARNING_RED
                    body = warning.add_run(step.warning)
                    body.font.color.rgb = WARNING_RED
            continue

        for item in value:
            _bullet(document, item)


def generate_docx(sop: Any) -> bytes:
    try:
        content, raw = structured_content(sop)

        document = Document()
        title = document.add_heading(sop.title or "Standard Operating Procedure", level=1)
        title.alignment = WD_ALIGN_PARAGRAPH.CENTER
        title.paragraph_format.space_after = Pt(20)

        _write_metadata_table(document, sop)
        document.add_paragraph("")

        if content is not None:
            _write_sections(document, content)
        else:
            document.add_heading("CONTENT", level=2)
            document.add_paragraph(json.dumps(raw, indent=2, ensure_ascii=False))

        buffer = io.BytesIO()
        document.save(buffer)
        return buffer.getvalue()
    except Exception as exc:
        logger.exception("Error generating DOCX for SOP %s", getattr(sop, "id", "?"))
        raise ExportError("Word", "Failed to generate Word document") from exc


# ----------------------------------------------------------------------- PDF


def _ensure_pdf_fonts() -> tuple[str, str]:
    """Register TrueType fonts with wide Unicode coverage and return their names."""
    global _FONT_CACHE
    if _FONT_CACHE:
        return _FONT_CACHE

    registered = set(pdfmetrics.getRegisteredFontNames())

    font_candidates = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
        "/usr/local/share/fonts/DejaVuSans.ttf",
        str(Path(__file__).resolve().parent / "fonts" / "DejaVuSans.ttf"),
        "C:/Windows/Fonts/arial.ttf",
        "/System/Library/Fonts/Supplemental/Arial.ttf",
    ]
    bold_candidates = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
        "/usr/local/share/fonts/DejaVuSans-Bold.ttf",
        str(Path(__file__).resolve().parent / "fonts" / "DejaVuSans-Bold.ttf"),
        "C:/Windows/Fonts/arialbd.ttf",
        "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    ]

    normal_name = "Helvetica"
    bold_name = "Helvetica-Bold"
    normal_path_used: str | None = None

    def _register(name: str, path: str) -> bool:
        if name in registered:
            return True
        candidate = Path(path)
        if not candidate.exists():
            return False
        try:
            pdfmetrics.registerFont(TTFont(name, str(candidate)))
        except Exception:
            logger.debug("Could not register font %s from %s", name, path)
            return False
        registered.add(name)
        return True

    for candidate_path in font_candidates:
        if _register("SOPSans", candidate_path):
            normal_name = "SOPSans"
            normal_path_used = candidate_path
            break

    for candidate_path in bold_candidates:
        if _register("SOPSans-Bold", candidate_path):
            bold_name = "SOPSans-Bold"
            break
    else:
        if normal_path_used and _register("SOPSans-Bold", normal_path_used):
            bold_name = "SOPSans-Bold"

    _FONT_CACHE = (normal_name, bold_name)
    return _FONT_CACHE


def _pdf(text: str) -> str:
    return escape(text or "").replace("\n", "<br/>")


def generate_pdf(sop: Any) -> bytes:
    try:
        content, raw = structured_content(sop)
        font_normal, font_bold = _ensure_pdf_fonts()
        # Base-14 fonts have no glyph for the warning sign
        warning_label = "⚠ WARNING:" if font_normal != "Helvetica" else "WARNING:"

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            leftMargin=20 * mm,
            rightMargin=20 * mm,
            title=sop.title or "SOP",
        )
        styles = getSampleStyleSheet()

        title_style = ParagraphStyle(
            "SOPTitle",
            parent=styles["Title"],
            fontSize=20,
            spaceAfter=8,
            alignment=TA_CENTER,
            fontName=font_bold,
            textColor=colors.HexColor("#2c3e50"),
        )
        status_style = ParagraphStyle(
            "SOPStatus",
            parent=styles["Normal"],
            fontSize=9,
            alignment=TA_CENTER,
            spaceAfter=14,
            fontName=font_bold,
            textColor=colors.HexColor("#6c757d"),
        )
        heading_style = ParagraphStyle(
            "SOPHeading",
            parent=styles["Heading2"],
            fontSize=14,
            spaceBefore=14,
            spaceAfter=8,
            fontName=font_bold,
            textColor=colors.HexColor("#2c3e50"),
        )
        body_style = ParagraphStyle(
            "SOPBody",
            parent=styles["Normal"],
            fontSize=10,
            leading=14,
            spaceAfter=6,
            fontName=font_normal,
        )
        indent_style = ParagraphStyle("SOPIndent", parent=body_style, leftIndent=14)
        warning_style = ParagraphStyle(
            "SOPWarning",
            parent=indent_style,
            textColor=colors.HexColor("#856404"),
            backColor=colors.HexColor("#fff3cd"),
            borderPadding=4,
            spaceBefore=4,
            spaceAfter=8,
        )

        story: List[Any] = [
            Paragraph(_pdf(sop.title or "Standard Operating Procedure"), title_style),
            Paragraph(_pdf((sop.status or "draft").upper()), status_style),
        ]

        meta_rows = [
            [Paragraph(f"<b>{_pdf(label)}</b>", body_style), Paragraph(_pdf(value), body_style)]
            for label, value in metadata_rows(sop)
        ]
        meta_table = Table(meta_rows, colWidths=[doc.width * 0.3, doc.width * 0.7])
        meta_table.hAlign = "LEFT"
        meta_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, -1), colors.HexColor("#f8f9fa")),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 4),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        story.append(meta_table)
        story.append(Spacer(1, 12))

        if content is None:
            story.append(Paragraph("CONTENT", heading_style))
            story.append(Paragraph(_pdf(json.dumps(raw, indent=2, ensure_ascii=False)), body_style))
        else:
            for number, (title, attr, _key) in enumerate(SECTION_ORDER, start=1):
                value = getattr(content, attr)
                if not value:
                    continue
                story.append(Paragraph(f"{number}. {title}", heading_style))
                if attr in ("purpose", "scope"):
                    story.append(Paragraph(_pdf(value), body_style))
                elif attr == "procedures":
                    for step in value:
                        story.append(Paragraph(f"<b>Step {step.step}: {_pdf(step.action)}</b>", body_style))
                        if step.details:
                            story.append(Paragraph(_pdf(step.details), indent_style))
                        if step.warning:
                            story.append(
                                Paragraph(f"<b>{warning_label}</b> {_pdf(step.warning)}", warning_style)
                            )
                else:
                    for item in value:
                        story.append(Paragraph(f"• {_pdf(item)}", indent_style))

        doc.build(story)
        return buffer.getvalue()
    except Exception as exc:
        logger.exception("Error generating PDF for SOP %s", getattr(sop, "id", "?"))
        raise ExportError("PDF", "Failed to generate PDF") from exc


__all__ = [
    "format_date",
    "metadata_rows",
    "export_filename",
    "structured_content",
    "generate_docx",
    "generate_pdf",
]
