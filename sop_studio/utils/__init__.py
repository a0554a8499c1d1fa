from .exporter import export_filename, generate_docx, generate_pdf, metadata_rows
from .html_export import generate_html
from .sop_content import SECTION_ORDER, ProcedureStep, SOPContent, dump_content, is_structured, load_content
from .xlsx_export import generate_xlsx

__all__ = [
    "SECTION_ORDER",
    "ProcedureStep",
    "SOPContent",
    "dump_content",
    "is_structured",
    "load_content",
    "export_filename",
    "generate_docx",
    "generate_html",
    "generate_pdf",
    "generate_xlsx",
    "metadata_rows",
]
