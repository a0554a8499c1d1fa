"""CRUD helpers over the SQLAlchemy models.

Every function takes an open ``Session`` and leaves committing to the caller
(see ``session_scope``); ``flush`` is used where generated ids or defaults are
needed immediately.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func, inspect, or_, select
from sqlalchemy.orm import Session

from sop_studio.errors import NotFoundError
from sop_studio.storage.models import SOP, Persona, PersonaResponse, PersonaScenario, _utcnow
from sop_studio.utils.sop_content import dump_content

logger = logging.getLogger(__name__)

SOP_FIELDS = {
    "title",
    "description",
    "content",
    "category",
    "status",
    "version",
    "industry",
    "tone",
    "language",
    "regulatory_framework",
    "effective_date",
}

# Columns that cannot be cleared by an update
SOP_REQUIRED = {"title", "status", "version", "industry", "tone", "language"}

PERSONA_FIELDS = {
    "name",
    "description",
    "age",
    "occupation",
    "background",
    "avatar_url",
    "voice_profile",
    "beliefs",
    "tone_profile",
    "behaviors",
    "category",
    "is_prebuilt",
    "tags",
}

PERSONA_JSON_FIELDS = {"voice_profile", "beliefs", "tone_profile", "behaviors"}

RECENT_LIMIT = 10


def _join_list(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        items = [str(v).strip() for v in value if v is not None and str(v).strip()]
        return ", ".join(items) or None
    text = str(value).strip()
    return text or None


def _encode_attribute(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _prepare_sop_values(values: Dict[str, Any]) -> Dict[str, Any]:
    prepared: Dict[str, Any] = {}
    for key, value in values.items():
        if key not in SOP_FIELDS:
            continue
        if key == "content":
            prepared[key] = dump_content(value)
        elif key == "regulatory_framework":
            prepared[key] = _join_list(value)
        else:
            prepared[key] = value
    return prepared


def _prepare_persona_values(values: Dict[str, Any]) -> Dict[str, Any]:
    prepared: Dict[str, Any] = {}
    for key, value in values.items():
        if key not in PERSONA_FIELDS:
            continue
        if key in PERSONA_JSON_FIELDS:
            prepared[key] = _encode_attribute(value)
        elif key == "tags":
            prepared[key] = _join_list(value)
        elif key == "is_prebuilt":
            prepared[key] = bool(value)
        elif key == "age":
            prepared[key] = int(value) if value else None
        else:
            prepared[key] = value
    return prepared


# ---------------------------------------------------------------- SOPs


def list_sops(session: Session, *, search: Optional[str] = None, category: Optional[str] = None) -> List[SOP]:
    stmt = select(SOP)
    if search:
        # literal substring; % and _ in the search text are not wildcards
        stmt = stmt.where(
            or_(SOP.title.icontains(search, autoescape=True), SOP.description.icontains(search, autoescape=True))
        )
    if category:
        stmt = stmt.where(SOP.category == category)
    stmt = stmt.order_by(SOP.updated_at.desc())
    return list(session.scalars(stmt))


def get_sop(session: Session, sop_id: str) -> SOP:
    sop = session.get(SOP, sop_id)
    if sop is None:
        raise NotFoundError("SOP", sop_id)
    return sop


def create_sop(session: Session, **values: Any) -> SOP:
    prepared = _prepare_sop_values(values)
    if not (prepared.get("title") or "").strip():
        raise ValueError("Title is required")
    for key in ("status", "version", "industry", "tone", "language"):
        if not prepared.get(key):
            prepared.pop(key, None)
    prepared.setdefault("content", "{}")
    sop = SOP(**prepared)
    session.add(sop)
    session.flush()
    logger.info("Created SOP %s (%r)", sop.id, sop.title)
    return sop


def update_sop(session: Session, sop_id: str, **values: Any) -> SOP:
    sop = get_sop(session, sop_id)
    for key, value in _prepare_sop_values(values).items():
        if key in SOP_REQUIRED and not value:
            continue
        setattr(sop, key, value)
    session.flush()
    logger.info("Updated SOP %s", sop.id)
    return sop


def delete_sop(session: Session, sop_id: str) -> None:
    sop = get_sop(session, sop_id)
    session.delete(sop)
    session.flush()
    logger.info("Deleted SOP %s", sop_id)


# ------------------------------------------------------------ personas


@dataclass
class PersonaSummary:
    persona: Persona
    responses: int = 0
    scenarios: int = 0


@dataclass
class PersonaDetail:
    persona: Persona
    responses: List[PersonaResponse]
    scenarios: List[PersonaScenario]


def _count_by_persona(session: Session, column: Any) -> Dict[str, int]:
    rows = session.execute(select(column, func.count()).group_by(column)).all()
    return {persona_id: count for persona_id, count in rows}


def list_personas(
    session: Session,
    *,
    category: Optional[str] = None,
    is_prebuilt: Optional[bool] = None,
) -> List[PersonaSummary]:
    stmt = select(Persona)
    if category:
        stmt = stmt.where(Persona.category == category)
    if is_prebuilt is not None:
        stmt = stmt.where(Persona.is_prebuilt == is_prebuilt)
    stmt = stmt.order_by(Persona.updated_at.desc())
    personas = list(session.scalars(stmt))

    response_counts = _count_by_persona(session, PersonaResponse.persona_id)
    scenario_counts = _count_by_persona(session, PersonaScenario.persona_id)
    return [
        PersonaSummary(
            persona=p,
            responses=response_counts.get(p.id, 0),
            scenarios=scenario_counts.get(p.id, 0),
        )
        for p in personas
    ]


def get_persona(session: Session, persona_id: str) -> Persona:
    persona = session.get(Persona, persona_id)
    if persona is None:
        raise NotFoundError("Persona", persona_id)
    return persona


def get_persona_detail(session: Session, persona_id: str, *, limit: int = RECENT_LIMIT) -> PersonaDetail:
    persona = get_persona(session, persona_id)
    responses = session.scalars(
        select(PersonaResponse)
        .where(PersonaResponse.persona_id == persona_id)
        .order_by(PersonaResponse.created_at.desc())
        .limit(limit)
    )
    scenarios = session.scalars(
        select(PersonaScenario)
        .where(PersonaScenario.persona_id == persona_id)
        .order_by(PersonaScenario.created_at.desc())
        .limit(limit)
    )
    return PersonaDetail(persona=persona, responses=list(responses), scenarios=list(scenarios))


def find_persona_by_name(session: Session, name: str) -> Optional[Persona]:
    return session.scalars(select(Persona).where(Persona.name == name).limit(1)).first()


def create_persona(session: Session, **values: Any) -> Persona:
    prepared = _prepare_persona_values(values)
    if not (prepared.get("name") or "").strip():
        raise ValueError("Name is required")
    persona = Persona(**prepared)
    session.add(persona)
    session.flush()
    logger.info("Created persona %s (%r)", persona.id, persona.name)
    return persona


def update_persona(session: Session, persona_id: str, **values: Any) -> Persona:
    persona = get_persona(session, persona_id)
    prepared = _prepare_persona_values(values)
    prepared.pop("is_prebuilt", None)
    if not prepared.get("name", persona.name):
        prepared.pop("name")
    for key, value in prepared.items():
        setattr(persona, key, value)
    session.flush()
    logger.info("Updated persona %s", persona.id)
    return persona


def delete_persona(session: Session, persona_id: str) -> None:
    persona = get_persona(session, persona_id)
    session.delete(persona)
    session.flush()
    logger.info("Deleted persona %s", persona_id)


def record_persona_response(
    session: Session,
    persona: Persona,
    *,
    prompt: str,
    response: str,
    content_type: str = "dialogue",
    scenario: Optional[str] = None,
    target_audience: Optional[str] = None,
) -> PersonaResponse:
    entry = PersonaResponse(
        persona_id=persona.id,
        prompt=prompt,
        response=response,
        content_type=content_type,
        scenario=scenario or None,
        target_audience=target_audience or None,
    )
    session.add(entry)
    _touch_usage(persona)
    session.flush()
    return entry


def record_persona_scenario(
    session: Session,
    persona: Persona,
    *,
    scenario_type: str,
    response: str,
    context: Optional[str] = None,
    emotional_state: Optional[str] = None,
    stress_level: Optional[int] = None,
) -> PersonaScenario:
    entry = PersonaScenario(
        persona_id=persona.id,
        scenario_type=scenario_type,
        context=context or None,
        emotional_state=emotional_state or None,
        stress_level=stress_level,
        response=response,
    )
    session.add(entry)
    _touch_usage(persona)
    session.flush()
    return entry


def _touch_usage(persona: Persona, when: Optional[datetime] = None) -> None:
    if inspect(persona).persistent:
        # incremented by the UPDATE itself so overlapping requests each count
        persona.usage_count = Persona.usage_count + 1
    else:
        persona.usage_count = (persona.usage_count or 0) + 1
    persona.last_used = when or _utcnow()


def seed_personas(session: Session, profiles: Iterable[Dict[str, Any]]) -> List[Persona]:
    """Insert the given profiles as pre-built personas, skipping names already stored."""
    created: List[Persona] = []
    for profile in profiles:
        if find_persona_by_name(session, profile["name"]) is not None:
            continue
        created.append(create_persona(session, **{**profile, "is_prebuilt": True}))
    return created


__all__ = [
    "PersonaSummary",
    "PersonaDetail",
    "list_sops",
    "get_sop",
    "create_sop",
    "update_sop",
    "delete_sop",
    "list_personas",
    "get_persona",
    "get_persona_detail",
    "find_persona_by_name",
    "create_persona",
    "update_persona",
    "delete_persona",
    "record_persona_response",
    "record_persona_scenario",
    "seed_personas",
]
