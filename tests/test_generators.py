import json

import pytest

from sop_studio.agents.persona_engine import (
    RESPONSE_FAILED,
    PersonaProfile,
    build_persona_messages,
    build_persona_system_prompt,
    build_scenario_prompt,
    generate_persona_response,
    generate_persona_scenario,
)
from sop_studio.agents.sop_generator import GENERATION_FAILED, generate_sop
from sop_studio.errors import GenerationError


# ═══════════════════════════════════════════════════════
# SOP GENERATION
# ═══════════════════════════════════════════════════════


def test_generate_sop_parses_model_json(fake_llm):
    content = generate_sop(
        "Glassware cleaning",
        "How technicians clean reusable glassware",
        industry="laboratory",
        language="fr",
        client=fake_llm,
    )

    assert content.purpose.startswith("Ensure lab glassware")
    assert [s.step for s in content.procedures] == [1, 2, 3]
    assert content.procedures[1].warning
    assert content.acceptance_criteria == ["No visible residue", "Cleaning log signed"]

    call = fake_llm.calls[0]
    assert call["temperature"] == 0.7
    assert call["max_tokens"] == 3500
    assert [m["role"] for m in call["messages"]] == ["system", "user"]
    assert call["messages"][1]["content"].endswith("Generate all content in Français.")


def test_generate_sop_accepts_fenced_json(fake_llm, sop_payload):
    fake_llm.reply = "Here you go:\n```json\n" + json.dumps(sop_payload) + "\n```"
    content = generate_sop("T", "D", client=fake_llm)
    assert content.scope.startswith("Applies to all laboratory")


@pytest.mark.parametrize("title, description", [("", "desc"), ("title", "  "), (None, None)])
def test_generate_sop_requires_title_and_description(fake_llm, title, description):
    with pytest.raises(ValueError, match="Title and description are required"):
        generate_sop(title, description, client=fake_llm)
    assert fake_llm.calls == []


@pytest.mark.parametrize("reply", ["", "   ", "I cannot help with that.", "[1, 2, 3]"])
def test_generate_sop_rejects_unusable_replies(fake_llm, reply):
    fake_llm.reply = reply
    with pytest.raises(GenerationError, match=GENERATION_FAILED):
        generate_sop("T", "D", client=fake_llm)


def test_generate_sop_wraps_client_failures(failing_llm):
    with pytest.raises(GenerationError) as excinfo:
        generate_sop("T", "D", client=failing_llm)
    assert str(excinfo.value) == GENERATION_FAILED
    assert "503" in str(excinfo.value.__cause__)


# ═══════════════════════════════════════════════════════
# PERSONA PROMPTS
# ═══════════════════════════════════════════════════════


@pytest.fixture
def churchill():
    return PersonaProfile(
        name="Winston Churchill",
        occupation="Statesman",
        age=90,
        background="Led Britain through WWII.",
        voice_profile=json.dumps(
            {"speakingStyle": "Eloquent", "catchphrases": ["Never give up", "Now this is not the end"]}
        ),
        beliefs={"philosophy": "Civilization must be defended", "principles": ["Stand firm"]},
        tone_profile=None,
        behaviors="{not json",
    )


def test_persona_prompt_identity_and_attributes(churchill):
    prompt = build_persona_system_prompt(churchill)

    assert prompt.startswith("You are Winston Churchill, Statesman (age 90).")
    assert "BACKGROUND:\nLed Britain through WWII." in prompt
    assert "- Speaking Style: Eloquent" in prompt
    assert "- Common Phrases: Never give up, Now this is not the end" in prompt
    assert "- Philosophy: Civilization must be defended" in prompt
    assert "- Core Principles: Stand firm" in prompt
    assert "Content Type: dialogue" in prompt
    assert "Scenario Context" not in prompt
    assert prompt.endswith(
        "Remember: You ARE Winston Churchill. Think, speak, and respond exactly as they would."
    )


def test_persona_prompt_defaults_for_missing_or_malformed_attributes(churchill):
    prompt = build_persona_system_prompt(churchill)
    # tone_profile is empty and behaviors is malformed JSON
    assert "- Default Mood: Neutral" in prompt
    assert "- Formality Level: Moderate" in prompt
    assert "- Decision Making: Thoughtful" in prompt
    assert "- Work Ethic: Professional" in prompt
    assert "- Political Views: Not specified" in prompt


def test_persona_prompt_minimal_identity():
    prompt = build_persona_system_prompt(PersonaProfile(name="Ada"))
    assert prompt.startswith("You are Ada.")
    assert "No background provided" in prompt
    assert "- Common Phrases: None specified" in prompt


def test_persona_prompt_empty_lists_render_blank():
    prompt = build_persona_system_prompt(
        PersonaProfile(name="Ada", voice_profile={"catchphrases": []}, beliefs={"principles": []})
    )
    assert "- Common Phrases: \n" in prompt
    assert "- Core Principles: \n" in prompt


def test_persona_prompt_includes_scenario_and_audience(churchill):
    prompt = build_persona_system_prompt(
        churchill, content_type="speech", scenario="Radio address", target_audience="Parliament"
    )
    assert "Content Type: speech" in prompt
    assert "Scenario Context: Radio address" in prompt
    assert "Target Audience: Parliament" in prompt


def test_persona_messages_map_history_roles(churchill):
    history = [
        {"role": "user", "content": "Hello"},
        {"role": "persona", "content": "Good evening"},
        {"role": "assistant", "content": "Indeed"},
    ]
    messages = build_persona_messages(churchill, "What now?", conversation_history=history)

    assert [m["role"] for m in messages] == ["system", "user", "assistant", "assistant", "user"]
    assert messages[-1]["content"] == "What now?"


def test_generate_persona_response_uses_persona_settings(fake_llm, churchill):
    fake_llm.reply = "We shall fight on the beaches."
    text = generate_persona_response(churchill, "Rally us", client=fake_llm)

    assert text == "We shall fight on the beaches."
    assert fake_llm.calls[0]["temperature"] == 0.9
    assert fake_llm.calls[0]["max_tokens"] == 2000


def test_generate_persona_response_empty_reply_is_empty_string(fake_llm, churchill):
    fake_llm.reply = ""
    assert generate_persona_response(churchill, "Hello", client=fake_llm) == ""


def test_generate_persona_response_validation_and_failures(fake_llm, failing_llm, churchill):
    with pytest.raises(ValueError, match="Prompt is required"):
        generate_persona_response(churchill, "   ", client=fake_llm)
    with pytest.raises(GenerationError, match=RESPONSE_FAILED):
        generate_persona_response(churchill, "Hello", client=failing_llm)


def test_scenario_prompt_lines():
    assert build_scenario_prompt("crisis") == "Respond to this crisis scenario\n\n"
    prompt = build_scenario_prompt(
        "interview", context="A hostile journalist", emotional_state="tired", stress_level=7
    )
    assert prompt.splitlines() == [
        "A hostile journalist",
        "Current emotional state: tired",
        "(Stress Level: 7/10)",
    ]


def test_generate_persona_scenario_passes_type_as_content_type(fake_llm, churchill):
    fake_llm.reply = "Steady on."
    text = generate_persona_scenario(churchill, "crisis", context="Bombing raid", client=fake_llm)

    assert text == "Steady on."
    system = fake_llm.calls[0]["messages"][0]["content"]
    assert "Content Type: crisis" in system
    assert "Scenario Context: Bombing raid" in system
