from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from sop_studio.agents.persona_engine import (
    PersonaProfile,
    generate_persona_response,
    generate_persona_scenario,
)
from sop_studio.api.dependencies import get_llm_client, get_session
from sop_studio.api.schemas import (
    PersonaCounts,
    PersonaCreate,
    PersonaDetailOut,
    PersonaGenerateRequest,
    PersonaGenerateResponse,
    PersonaListItem,
    PersonaOut,
    PersonaResponseOut,
    PersonaScenarioOut,
    PersonaUpdate,
    ScenarioRequest,
    ScenarioResponse,
    SeedResponse,
    SuccessResponse,
)
from sop_studio.config.llm_client import ChatClient
from sop_studio.errors import GenerationError
from sop_studio.personas import prebuilt_profiles
from sop_studio.storage import repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/personas", tags=["personas"])


@router.get("", response_model=List[PersonaListItem])
def list_personas(
    category: Optional[str] = None,
    is_prebuilt: Optional[bool] = Query(None, alias="isPrebuilt"),
    session: Session = Depends(get_session),
):
    items = []
    for summary in repository.list_personas(session, category=category, is_prebuilt=is_prebuilt):
        item = PersonaListItem.model_validate(summary.persona)
        item.counts = PersonaCounts(responses=summary.responses, scenarios=summary.scenarios)
        items.append(item)
    return items


@router.post("", response_model=PersonaOut)
def create_persona(body: PersonaCreate, session: Session = Depends(get_session)):
    persona = repository.create_persona(session, **body.model_dump(exclude_none=True))
    session.commit()
    return persona


@router.post("/seed", response_model=SeedResponse)
def seed_personas(session: Session = Depends(get_session)):
    created = repository.seed_personas(session, prebuilt_profiles())
    session.commit()
    logger.info("Seeded %d pre-built personas", len(created))
    return {"created": len(created), "personas": created}


@router.get("/{persona_id}", response_model=PersonaDetailOut)
def get_persona(persona_id: str, session: Session = Depends(get_session)):
    detail = repository.get_persona_detail(session, persona_id)
    base = PersonaOut.model_validate(detail.persona).model_dump()
    return PersonaDetailOut(
        **base,
        responses=[PersonaResponseOut.model_validate(r) for r in detail.responses],
        scenarios=[PersonaScenarioOut.model_validate(s) for s in detail.scenarios],
    )


@router.put("/{persona_id}", response_model=PersonaOut)
def update_persona(persona_id: str, body: PersonaUpdate, session: Session = Depends(get_session)):
    persona = repository.update_persona(session, persona_id, **body.model_dump(exclude_unset=True))
    session.commit()
    return persona


@router.delete("/{persona_id}", response_model=SuccessResponse)
def delete_persona(persona_id: str, session: Session = Depends(get_session)):
    repository.delete_persona(session, persona_id)
    session.commit()
    return {"success": True}


@router.post("/{persona_id}/generate", response_model=PersonaGenerateResponse)
def generate_response(
    persona_id: str,
    body: PersonaGenerateRequest,
    session: Session = Depends(get_session),
    llm: ChatClient = Depends(get_llm_client),
):
    if not (body.prompt or "").strip():
        raise HTTPException(status_code=400, detail="Prompt is required")

    persona = repository.get_persona(session, persona_id)
    try:
        text = generate_persona_response(
            PersonaProfile.from_record(persona),
            body.prompt,
            content_type=body.content_type,
            scenario=body.scenario,
            target_audience=body.target_audience,
            conversation_history=[m.model_dump() for m in body.conversation_history],
            client=llm,
        )
    except GenerationError as exc:
        logger.exception("Error generating response for persona %s", persona_id)
        raise HTTPException(status_code=500, detail="Failed to generate response") from exc

    if body.save_response:
        repository.record_persona_response(
            session,
            persona,
            prompt=body.prompt,
            response=text,
            content_type=body.content_type,
            scenario=body.scenario,
            target_audience=body.target_audience,
        )
        session.commit()
    return {"response": text}


@router.post("/{persona_id}/scenarios", response_model=ScenarioResponse)
def run_scenario(
    persona_id: str,
    body: ScenarioRequest,
    session: Session = Depends(get_session),
    llm: ChatClient = Depends(get_llm_client),
):
    if not (body.scenario_type or "").strip():
        raise HTTPException(status_code=400, detail="Scenario type is required")

    persona = repository.get_persona(session, persona_id)
    try:
        text = generate_persona_scenario(
            PersonaProfile.from_record(persona),
            body.scenario_type,
            context=body.context,
            emotional_state=body.emotional_state,
            stress_level=body.stress_level,
            client=llm,
        )
    except GenerationError as exc:
        logger.exception("Error running %s scenario for persona %s", body.scenario_type, persona_id)
        raise HTTPException(status_code=500, detail="Failed to generate response") from exc

    scenario = repository.record_persona_scenario(
        session,
        persona,
        scenario_type=body.scenario_type,
        response=text,
        context=body.context,
        emotional_state=body.emotional_state,
        stress_level=body.stress_level,
    )
    session.commit()
    return {"response": text, "scenario": scenario}
