from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from sop_studio.config.llm_client import ChatClient, build_chat_client
from sop_studio.config.settings import PERSONA_MAX_TOKENS, PERSONA_TEMPERATURE
from sop_studio.errors import GenerationError, LLMClientError

logger = logging.getLogger(__name__)

RESPONSE_FAILED = "Failed to generate persona response"


@dataclass
class PersonaProfile:
    name: str
    occupation: Optional[str] = None
    age: Optional[int] = None
    background: Optional[str] = None
    voice_profile: Any = None
    beliefs: Any = None
    tone_profile: Any = None
    behaviors: Any = None

    @classmethod
    def from_record(cls, record: Any) -> "PersonaProfile":
        return cls(
            name=record.name,
            occupation=record.occupation,
            age=record.age,
            background=record.background,
            voice_profile=record.voice_profile,
            beliefs=record.beliefs,
            tone_profile=record.tone_profile,
            behaviors=record.behaviors,
        )


def load_attributes(raw: Any, label: str) -> Dict[str, Any]:
    if not raw:
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)
    try:
        value = json.loads(raw)
    except (TypeError, json.JSONDecodeError):
        logger.warning("Ignoring malformed %s JSON on persona", label)
        return {}
    return value if isinstance(value, dict) else {}


def _joined(values: Any, default: str) -> str:
    if isinstance(values, list):
        return ", ".join(str(v) for v in values)
    if isinstance(values, str) and values.strip():
        return values
    return default


def build_persona_system_prompt(
    persona: PersonaProfile,
    *,
    content_type: str = "dialogue",
    scenario: Optional[str] = None,
    target_audience: Optional[str] = None,
) -> str:
    voice = load_attributes(persona.voice_profile, "voiceProfile")
    beliefs = load_attributes(persona.beliefs, "beliefs")
    tone = load_attributes(persona.tone_profile, "toneProfile")
    behaviors = load_attributes(persona.behaviors, "behaviors")

    identity = f"You are {persona.name}"
    if persona.occupation:
        identity += f", {persona.occupation}"
    if persona.age:
        identity += f" (age {persona.age})"
    identity += "."

    name = persona.name
    lines: List[str] = [
        identity,
        "",
        "BACKGROUND:",
        persona.background or "No background provided",
        "",
        "VOICE CHARACTERISTICS:",
        f"- Speaking Style: {voice.get('speakingStyle') or 'Natural conversational'}",
        f"- Vocabulary Level: {voice.get('vocabularyLevel') or 'Standard'}",
        f"- Sentence Structure: {voice.get('sentenceStructure') or 'Varied'}",
        f"- Common Phrases: {_joined(voice.get('catchphrases'), 'None specified')}",
        f"- Speech Rhythm: {voice.get('speechRhythm') or 'Natural pace'}",
        "",
        "CORE BELIEFS & VALUES:",
        f"- Political Views: {beliefs.get('political') or 'Not specified'}",
        f"- Moral Framework: {beliefs.get('moral') or 'Not specified'}",
        f"- Philosophy: {beliefs.get('philosophy') or 'Not specified'}",
        f"- Core Principles: {_joined(beliefs.get('principles'), 'Not specified')}",
        "",
        "TONE & EMOTIONAL RANGE:",
        f"- Default Mood: {tone.get('defaultMood') or 'Neutral'}",
        f"- Emotional Range: {tone.get('emotionalRange') or 'Balanced'}",
        f"- Humor Style: {tone.get('humorStyle') or 'Situational'}",
        f"- Formality Level: {tone.get('formalityLevel') or 'Moderate'}",
        "",
        "BEHAVIORAL PATTERNS:",
        f"- Decision Making: {behaviors.get('decisionMaking') or 'Thoughtful'}",
        f"- Conflict Response: {behaviors.get('conflictResponse') or 'Diplomatic'}",
        f"- Social Preferences: {behaviors.get('socialPreferences') or 'Balanced'}",
        f"- Work Ethic: {behaviors.get('workEthic') or 'Professional'}",
        "",
        "CRITICAL INSTRUCTIONS:",
        f"1. Respond EXACTLY as {name} would, using their distinctive voice, vocabulary, and speaking patterns",
        "2. Incorporate their catchphrases naturally when appropriate",
        "3. Let their beliefs and values inform your perspective",
        "4. Match their tone and emotional style",
        "5. Exhibit their characteristic behavioral patterns",
        "6. Stay completely in character - never break the persona",
        "7. If generating dialogue, use their specific speech rhythm and sentence structure",
        "",
        f"Content Type: {content_type}",
        f"Scenario Context: {scenario}" if scenario else "",
        f"Target Audience: {target_audience}" if target_audience else "",
        "",
        f"Remember: You ARE {name}. Think, speak, and respond exactly as they would.",
    ]
    return "\n".join(lines)


def build_persona_messages(
    persona: PersonaProfile,
    prompt: str,
    *,
    content_type: str = "dialogue",
    scenario: Optional[str] = None,
    target_audience: Optional[str] = None,
    conversation_history: Optional[List[Mapping[str, Any]]] = None,
) -> List[Dict[str, str]]:
    messages: List[Dict[str, str]] = [
        {
            "role": "system",
            "content": build_persona_system_prompt(
                persona,
                content_type=content_type,
                scenario=scenario,
                target_audience=target_audience,
            ),
        }
    ]
    for entry in conversation_history or []:
        role = "user" if entry.get("role") == "user" else "assistant"
        messages.append({"role": role, "content": str(entry.get("content") or "")})
    messages.append({"role": "user", "content": prompt})
    return messages


def generate_persona_response(
    persona: PersonaProfile,
    prompt: str,
    *,
    content_type: str = "dialogue",
    scenario: Optional[str] = None,
    target_audience: Optional[str] = None,
    conversation_history: Optional[List[Mapping[str, Any]]] = None,
    client: Optional[ChatClient] = None,
) -> str:
    if not prompt or not prompt.strip():
        raise ValueError("Prompt is required")

    messages = build_persona_messages(
        persona,
        prompt,
        content_type=content_type,
        scenario=scenario,
        target_audience=target_audience,
        conversation_history=conversation_history,
    )
    llm = client or build_chat_client()
    logger.info(
        "Generating %s response as %r (%d history messages)",
        content_type,
        persona.name,
        len(messages) - 2,
    )
    try:
        text = llm.complete(messages, temperature=PERSONA_TEMPERATURE, max_tokens=PERSONA_MAX_TOKENS)
    except LLMClientError as exc:
        logger.error("Error generating persona response: %s", exc)
        raise GenerationError(RESPONSE_FAILED) from exc
    return text or ""


def build_scenario_prompt(
    scenario_type: str,
    *,
    context: Optional[str] = None,
    emotional_state: Optional[str] = None,
    stress_level: Optional[int] = None,
) -> str:
    stress_context = f"(Stress Level: {stress_level}/10)" if stress_level else ""
    emotional_context = f"Current emotional state: {emotional_state}" if emotional_state else ""
    return "\n".join(
        [
            context or f"Respond to this {scenario_type} scenario",
            emotional_context,
            stress_context,
        ]
    )


def generate_persona_scenario(
    persona: PersonaProfile,
    scenario_type: str,
    *,
    context: Optional[str] = None,
    emotional_state: Optional[str] = None,
    stress_level: Optional[int] = None,
    client: Optional[ChatClient] = None,
) -> str:
    prompt = build_scenario_prompt(
        scenario_type,
        context=context,
        emotional_state=emotional_state,
        stress_level=stress_level,
    )
    return generate_persona_response(
        persona,
        prompt,
        content_type=scenario_type,
        scenario=context,
        client=client,
    )


__all__ = [
    "PersonaProfile",
    "load_attributes",
    "RESPONSE_FAILED",
    "build_persona_system_prompt",
    "build_persona_messages",
    "generate_persona_response",
    "build_scenario_prompt",
    "generate_persona_scenario",
]
