"""Relational storage for SOPs and personas."""

from .database import (
    build_engine,
    configure,
    current_session_factory,
    get_session_factory,
    init_db,
    session_scope,
)
from .models import SOP, Base, Persona, PersonaResponse, PersonaScenario

__all__ = [
    "Base",
    "SOP",
    "Persona",
    "PersonaResponse",
    "PersonaScenario",
    "build_engine",
    "configure",
    "current_session_factory",
    "get_session_factory",
    "init_db",
    "session_scope",
]
