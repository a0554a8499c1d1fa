from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from sop_studio.agents.sop_generator import generate_sop
from sop_studio.api.dependencies import get_llm_client, get_session
from sop_studio.api.schemas import (
    GenerateRequest,
    GenerateResponse,
    SOPCreate,
    SOPOut,
    SOPUpdate,
    SuccessResponse,
)
from sop_studio.config.llm_client import ChatClient
from sop_studio.errors import GenerationError
from sop_studio.storage import repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["sops"])


@router.post("/generate", response_model=GenerateResponse)
def generate(body: GenerateRequest, llm: ChatClient = Depends(get_llm_client)):
    if not (body.title or "").strip() or not (body.description or "").strip():
        raise HTTPException(status_code=400, detail="Title and description are required")
    try:
        content = generate_sop(
            body.title,
            body.description,
            industry=body.industry,
            tone=body.tone,
            language=body.language,
            regulatory_framework=body.regulatory_framework,
            client=llm,
        )
    except GenerationError as exc:
        logger.exception("Error generating SOP %r", body.title)
        raise HTTPException(status_code=500, detail="Failed to generate SOP") from exc
    return {"content": content.to_dict()}


@router.get("/sops", response_model=List[SOPOut])
def list_sops(
    search: Optional[str] = None,
    category: Optional[str] = None,
    session: Session = Depends(get_session),
):
    return repository.list_sops(session, search=search, category=category)


@router.post("/sops", response_model=SOPOut)
def create_sop(body: SOPCreate, session: Session = Depends(get_session)):
    sop = repository.create_sop(session, **body.model_dump(exclude_none=True))
    session.commit()
    return sop


@router.get("/sops/{sop_id}", response_model=SOPOut)
def get_sop(sop_id: str, session: Session = Depends(get_session)):
    return repository.get_sop(session, sop_id)


@router.put("/sops/{sop_id}", response_model=SOPOut)
def update_sop(sop_id: str, body: SOPUpdate, session: Session = Depends(get_session)):
    sop = repository.update_sop(session, sop_id, **body.model_dump(exclude_unset=True))
    session.commit()
    return sop


@router.delete("/sops/{sop_id}", response_model=SuccessResponse)
def delete_sop(sop_id: str, session: Session = Depends(get_session)):
    repository.delete_sop(session, sop_id)
    session.commit()
    return {"success": True}
