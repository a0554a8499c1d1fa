from __future__ import annotations

import logging
from typing import Any, Callable

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from sop_studio.api.dependencies import get_session
from sop_studio.errors import ExportError
from sop_studio.storage import repository
from sop_studio.utils.exporter import export_filename, generate_docx, generate_pdf
from sop_studio.utils.html_export import generate_html
from sop_studio.utils.xlsx_export import generate_xlsx

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/export", tags=["export"])

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _download(
    session: Session,
    sop_id: str,
    render: Callable[[Any], Any],
    *,
    extension: str,
    media_type: str,
    failure: str,
    suffix: str = "",
) -> Response:
    sop = repository.get_sop(session, sop_id)
    try:
        payload = render(sop)
    except ExportError as exc:
        logger.error("Export of SOP %s as %s failed: %s", sop_id, extension, exc)
        raise HTTPException(status_code=500, detail=failure) from exc
    filename = export_filename(sop, extension, suffix)
    return Response(
        content=payload,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{sop_id}")
def export_pdf(sop_id: str, session: Session = Depends(get_session)):
    return _download(
        session,
        sop_id,
        generate_pdf,
        extension="pdf",
        media_type="application/pdf",
        failure="Failed to generate PDF",
    )


@router.get("/{sop_id}/docx")
def export_docx(sop_id: str, session: Session = Depends(get_session)):
    return _download(
        session,
        sop_id,
        generate_docx,
        extension="docx",
        media_type=DOCX_MEDIA_TYPE,
        failure="Failed to export SOP as Word document",
    )


@router.get("/{sop_id}/html")
def export_html(sop_id: str, session: Session = Depends(get_session)):
    return _download(
        session,
        sop_id,
        generate_html,
        extension="html",
        media_type="text/html",
        failure="Failed to export SOP as HTML",
    )


@router.get("/{sop_id}/xlsx")
def export_xlsx(sop_id: str, session: Session = Depends(get_session)):
    return _download(
        session,
        sop_id,
        generate_xlsx,
        extension="xlsx",
        media_type=XLSX_MEDIA_TYPE,
        failure="Failed to export SOP as Excel checklist",
        suffix="_checklist",
    )
