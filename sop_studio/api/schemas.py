"""Request and response bodies. Wire names are camelCase; Python names stay snake_case."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


Frameworks = Optional[Union[List[str], str]]
Attribute = Optional[Union[Dict[str, Any], str]]


# ---------------------------------------------------------------- SOPs


class GenerateRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    industry: str = "general"
    tone: str = "formal"
    language: str = "en"
    regulatory_framework: Frameworks = None


class GenerateResponse(CamelModel):
    content: Dict[str, Any]


class SOPCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    content: Any = None
    category: Optional[str] = None
    status: Optional[str] = None
    version: Optional[str] = None
    industry: Optional[str] = None
    tone: Optional[str] = None
    language: Optional[str] = None
    regulatory_framework: Frameworks = None
    effective_date: Optional[datetime] = None


class SOPUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    content: Any = None
    category: Optional[str] = None
    status: Optional[str] = None
    version: Optional[str] = None
    industry: Optional[str] = None
    tone: Optional[str] = None
    language: Optional[str] = None
    regulatory_framework: Frameworks = None
    effective_date: Optional[datetime] = None


class SOPOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    content: str
    category: Optional[str] = None
    status: str
    version: str
    industry: str
    tone: str
    language: str
    regulatory_framework: Optional[str] = None
    effective_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


# ------------------------------------------------------------ personas


class PersonaCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    age: Optional[int] = None
    occupation: Optional[str] = None
    background: Optional[str] = None
    avatar_url: Optional[str] = None
    voice_profile: Attribute = None
    beliefs: Attribute = None
    tone_profile: Attribute = None
    behaviors: Attribute = None
    category: Optional[str] = None
    is_prebuilt: bool = False
    tags: Frameworks = None


class PersonaUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    age: Optional[int] = None
    occupation: Optional[str] = None
    background: Optional[str] = None
    avatar_url: Optional[str] = None
    voice_profile: Attribute = None
    beliefs: Attribute = None
    tone_profile: Attribute = None
    behaviors: Attribute = None
    category: Optional[str] = None
    tags: Frameworks = None


class PersonaCounts(BaseModel):
    responses: int = 0
    scenarios: int = 0


class PersonaOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    age: Optional[int] = None
    occupation: Optional[str] = None
    background: Optional[str] = None
    avatar_url: Optional[str] = None
    voice_profile: Optional[str] = None
    beliefs: Optional[str] = None
    tone_profile: Optional[str] = None
    behaviors: Optional[str] = None
    category: Optional[str] = None
    is_prebuilt: bool = False
    tags: Optional[str] = None
    usage_count: int = 0
    last_used: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class PersonaListItem(PersonaOut):
    counts: PersonaCounts = Field(default_factory=PersonaCounts, alias="_count")


class PersonaResponseOut(CamelModel):
    id: str
    persona_id: str
    prompt: str
    response: str
    content_type: str
    scenario: Optional[str] = None
    target_audience: Optional[str] = None
    created_at: datetime


class PersonaScenarioOut(CamelModel):
    id: str
    persona_id: str
    scenario_type: str
    context: Optional[str] = None
    emotional_state: Optional[str] = None
    stress_level: Optional[int] = None
    response: Optional[str] = None
    created_at: datetime


class PersonaDetailOut(PersonaOut):
    responses: List[PersonaResponseOut] = Field(default_factory=list)
    scenarios: List[PersonaScenarioOut] = Field(default_factory=list)


class ChatMessage(BaseModel):
    role: str
    content: str


class PersonaGenerateRequest(CamelModel):
    prompt: Optional[str] = None
    content_type: str = "dialogue"
    scenario: Optional[str] = None
    target_audience: Optional[str] = None
    conversation_history: List[ChatMessage] = Field(default_factory=list)
    save_response: bool = True


class PersonaGenerateResponse(CamelModel):
    response: str


class ScenarioRequest(CamelModel):
    scenario_type: Optional[str] = None
    context: Optional[str] = None
    emotional_state: Optional[str] = None
    stress_level: Optional[int] = Field(default=None, ge=1, le=10)


class ScenarioResponse(CamelModel):
    response: str
    scenario: PersonaScenarioOut


class SeedResponse(CamelModel):
    created: int
    personas: List[PersonaOut]


class SuccessResponse(BaseModel):
    success: bool = True


__all__ = [
    "CamelModel",
    "GenerateRequest",
    "GenerateResponse",
    "SOPCreate",
    "SOPUpdate",
    "SOPOut",
    "PersonaCreate",
    "PersonaUpdate",
    "PersonaCounts",
    "PersonaOut",
    "PersonaListItem",
    "PersonaResponseOut",
    "PersonaScenarioOut",
    "PersonaDetailOut",
    "ChatMessage",
    "PersonaGenerateRequest",
    "PersonaGenerateResponse",
    "ScenarioRequest",
    "ScenarioResponse",
    "SeedResponse",
    "SuccessResponse",
]
