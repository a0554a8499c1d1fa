from .sop_generator import build_sop_system_prompt, build_sop_user_prompt, generate_sop
from .persona_engine import (
    PersonaProfile,
    build_persona_system_prompt,
    generate_persona_response,
    generate_persona_scenario,
)

__all__ = [
    "build_sop_system_prompt",
    "build_sop_user_prompt",
    "generate_sop",
    "PersonaProfile",
    "build_persona_system_prompt",
    "generate_persona_response",
    "generate_persona_scenario",
]
