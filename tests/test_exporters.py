import io
import json
from datetime import datetime

import pytest
from docx import Document
from openpyxl import load_workbook

from sop_studio.errors import ExportError
from sop_studio.storage import repository
from sop_studio.utils.exporter import (
    export_filename,
    format_date,
    generate_docx,
    generate_pdf,
    metadata_rows,
)
from sop_studio.utils.html_export import generate_html
from sop_studio.utils.xlsx_export import generate_xlsx, step_row_height


@pytest.fixture
def stored_sop(session, sop_payload):
    sop = repository.create_sop(
        session,
        title="Glassware Cleaning & Drying",
        description="Weekly glassware routine",
        content=sop_payload,
        category="Lab Ops",
        industry="laboratory",
        language="fr",
        regulatory_framework=["ISO 17025", "GLP"],
        effective_date=datetime(2024, 3, 5),
    )
    session.commit()
    return sop


@pytest.fixture
def freeform_sop(session):
    sop = repository.create_sop(session, title="Scratch", content={"notes": ["a", "b"]})
    session.commit()
    return sop


# ═══════════════════════════════════════════════════════
# SHARED HELPERS
# ═══════════════════════════════════════════════════════


def test_metadata_rows(stored_sop):
    rows = dict(metadata_rows(stored_sop))
    assert rows["Document ID:"] == stored_sop.id
    assert rows["Version:"] == "1.0"
    assert rows["Status:"] == "DRAFT"
    assert rows["Category:"] == "Lab Ops"
    assert rows["Regulatory Framework:"] == "ISO 17025, GLP"
    assert rows["Effective Date:"] == "3/5/2024"
    assert "Created:" in rows and "Last Updated:" in rows


def test_metadata_rows_skip_empty_optionals(freeform_sop):
    labels = [label for label, _ in metadata_rows(freeform_sop)]
    assert "Category:" not in labels
    assert "Regulatory Framework:" not in labels
    assert "Effective Date:" not in labels
    assert format_date(None) == ""


def test_export_filename(stored_sop):
    assert export_filename(stored_sop, "docx") == "glassware_cleaning___drying_v1.0.docx"
    assert export_filename(stored_sop, "xlsx", "_checklist") == "glassware_cleaning___drying_checklist_v1.0.xlsx"

    stored_sop.title = "A" * 80
    stored_sop.version = "2.3"
    assert export_filename(stored_sop, "pdf") == "a" * 50 + "_v2.3.pdf"


# ═══════════════════════════════════════════════════════
# DOCX
# ═══════════════════════════════════════════════════════


def test_docx_layout(stored_sop):
    doc = Document(io.BytesIO(generate_docx(stored_sop)))
    texts = [p.text for p in doc.paragraphs]

    assert next(t for t in texts if t) == "Glassware Cleaning & Drying"
    headings = [t for t in texts if t[:2] in {f"{n}." for n in range(1, 8)}]
    assert headings == [
        "1. PURPOSE",
        "2. SCOPE",
        "3. RESPONSIBILITIES",
        "4. PROCEDURES",
        "5. SAFETY NOTES",
        "6. REFERENCES",
        "7. ACCEPTANCE CRITERIA",
    ]
    assert "• Technician: performs the cleaning" in texts
    assert "Step 1: Rinse" in texts
    assert "Soak in detergent solution for 30 minutes." in texts

    table = doc.tables[0]
    labels = [row.cells[0].text for row in table.rows]
    assert labels[:3] == ["Document ID:", "Version:", "Status:"]
    assert table.rows[2].cells[1].text == "DRAFT"


def test_docx_warning_is_red(stored_sop):
    doc = Document(io.BytesIO(generate_docx(stored_sop)))
    warning = next(p for p in doc.paragraphs if p.text.startswith("⚠ WARNING: "))
    label, body = warning.runs[0], warning.runs[1]
    assert label.bold
    assert str(label.font.color.rgb) == "FF0000"
    assert body.text == "Wear nitrile gloves <always> & goggles"


def test_docx_falls_back_to_raw_content(freeform_sop):
    doc = Document(io.BytesIO(generate_docx(freeform_sop)))
    texts = [p.text for p in doc.paragraphs]
    assert "CONTENT" in texts
    assert json.loads(texts[texts.index("CONTENT") + 1]) == {"notes": ["a", "b"]}


# ═══════════════════════════════════════════════════════
# HTML
# ═══════════════════════════════════════════════════════


def test_html_document(stored_sop):
    html = generate_html(stored_sop)

    assert html.startswith("<!DOCTYPE html>")
    assert '<html lang="fr">' in html
    assert "<title>Glassware Cleaning &amp; Drying</title>" in html
    assert '<span class="status-badge status-draft">DRAFT</span>' in html
    assert "<h2>4. PROCEDURES</h2>" in html
    assert "Step 2: Soak" in html
    assert "Wear nitrile gloves &lt;always&gt; &amp; goggles" in html
    assert "<always>" not in html
    assert 'class="section-content safety-section"' in html
    assert '<ul class="criteria-list"><li>No visible residue</li>' in html
    assert "Regulatory Framework:" in html


def test_html_skips_empty_sections(session):
    sop = repository.create_sop(session, title="Tiny", content={"purpose": "Only purpose"})
    html = generate_html(sop)
    assert "<h2>1. PURPOSE</h2>" in html
    assert "2. SCOPE" not in html
    assert "PROCEDURES" not in html


def test_html_fallback_escapes_raw_json(session):
    sop = repository.create_sop(session, title="Raw", content={"note": "<b>bold</b>"})
    html = generate_html(sop)
    assert "<h2>1. CONTENT</h2>" in html
    assert "&lt;b&gt;bold&lt;/b&gt;" in html


# ═══════════════════════════════════════════════════════
# XLSX
# ═══════════════════════════════════════════════════════


def test_xlsx_checklist(stored_sop):
    wb = load_workbook(io.BytesIO(generate_xlsx(stored_sop)))
    ws = wb["SOP Checklist"]

    assert [ws.column_dimensions[c].width for c in "ABCDE"] == [10, 40, 50, 12, 30]
    assert ws["A1"].value == "Glassware Cleaning & Drying"
    assert ws["A1"].font.bold
    assert ws["A1"].fill.fgColor.rgb == "FF4472C4"
    assert "A1:E1" in {str(r) for r in ws.merged_cells.ranges}
    assert ws["A2"].value == f"Document ID: {stored_sop.id} | Version: 1.0 | Status: DRAFT"
    assert ws["A3"].value == "Category: Lab Ops | Industry: laboratory | Frameworks: ISO 17025, GLP"

    header = [ws.cell(row=5, column=c).value for c in range(1, 6)]
    assert header == ["Step #", "Action", "Details", "Completed ✓", "Notes"]
    assert ws.cell(row=5, column=1).fill.fgColor.rgb == "FF70AD47"

    assert [ws.cell(row=r, column=1).value for r in (6, 7, 8)] == [1, 2, 3]
    assert ws.cell(row=7, column=5).value == "⚠ Wear nitrile gloves <always> & goggles"
    assert ws.cell(row=7, column=5).font.color.rgb == "FFFF0000"
    assert ws.cell(row=6, column=2).border.top.style == "thin"

    assert ws["A10"].value == "SAFETY NOTES"
    assert ws["A11"].value == "• Detergent is an eye irritant"
    assert ws["A13"].value == "ACCEPTANCE CRITERIA"
    assert ws["A15"].value == "• Cleaning log signed"


def test_xlsx_without_procedures_has_header_only(freeform_sop):
    wb = load_workbook(io.BytesIO(generate_xlsx(freeform_sop)))
    ws = wb.active
    # general industry still produces the secondary metadata row
    assert ws["A5"].value == "Step #"
    assert ws["A6"].value is None


@pytest.mark.parametrize("details, height", [(None, 20), ("", 20), ("x" * 50, 20), ("x" * 120, 45)])
def test_step_row_height(details, height):
    assert step_row_height(details) == height


# ═══════════════════════════════════════════════════════
# PDF
# ═══════════════════════════════════════════════════════


def test_pdf_renders(stored_sop, freeform_sop):
    data = generate_pdf(stored_sop)
    assert data.startswith(b"%PDF")
    assert len(data) > 1000
    assert generate_pdf(freeform_sop).startswith(b"%PDF")


# ═══════════════════════════════════════════════════════
# FAILURES
# ═══════════════════════════════════════════════════════


@pytest.mark.parametrize(
    "render, fmt",
    [(generate_docx, "Word"), (generate_html, "HTML"), (generate_xlsx, "Excel"), (generate_pdf, "PDF")],
)
def test_corrupt_content_raises_export_error(session, render, fmt):
    sop = repository.create_sop(session, title="Broken", content="{not valid json")
    with pytest.raises(ExportError) as excinfo:
        render(sop)
    assert excinfo.value.format == fmt
