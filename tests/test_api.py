import json

import pytest
from faker import Faker

from sop_studio.errors import LLMClientError
from sop_studio.personas import PREBUILT_PERSONAS

fake = Faker()


# ═══════════════════════════════════════════════════════
# HEALTH / TEMPLATES
# ═══════════════════════════════════════════════════════


@pytest.mark.anyio
async def test_health_check(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.anyio
async def test_templates_catalogue(client):
    response = await client.get("/api/templates")
    assert response.status_code == 200
    data = response.json()
    assert {i["key"] for i in data["industries"]} >= {"general", "healthcare", "construction"}
    assert [t["key"] for t in data["tones"]] == ["formal", "technical", "simple", "friendly"]
    spanish = next(lang for lang in data["languages"] if lang["code"] == "es")
    assert spanish["nativeName"] == "Español"


@pytest.mark.anyio
async def test_unknown_route_uses_error_shape(client):
    response = await client.get("/api/nothing-here")
    assert response.status_code == 404
    assert "error" in response.json()


# ═══════════════════════════════════════════════════════
# GENERATE
# ═══════════════════════════════════════════════════════


@pytest.mark.anyio
async def test_generate_returns_sop_content(client, fake_llm):
    response = await client.post(
        "/api/generate",
        json={
            "title": fake.sentence(nb_words=4),
            "description": fake.paragraph(nb_sentences=2),
            "industry": "healthcare",
            "tone": "simple",
            "language": "de",
            "regulatoryFramework": ["HIPAA"],
        },
    )
    assert response.status_code == 200
    content = response.json()["content"]
    assert content["purpose"].startswith("Ensure lab glassware")
    assert content["procedures"][1]["warning"]
    assert "safetyNotes" in content and "acceptanceCriteria" in content

    system_prompt = fake_llm.calls[0]["messages"][0]["content"]
    assert "INDUSTRY CONTEXT: Healthcare" in system_prompt
    assert "Regulatory Compliance: This SOP must comply with the following frameworks: HIPAA" in system_prompt


@pytest.mark.anyio
@pytest.mark.parametrize("body", [{}, {"title": "Only title"}, {"description": "Only description"}])
async def test_generate_requires_title_and_description(client, fake_llm, body):
    response = await client.post("/api/generate", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "Title and description are required"}
    assert fake_llm.calls == []


@pytest.mark.anyio
async def test_generate_failure_is_500(client, fake_llm):
    fake_llm.reply = LLMClientError("LLM request failed: timeout")
    response = await client.post("/api/generate", json={"title": "T", "description": "D"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate SOP"}


@pytest.mark.anyio
async def test_generate_unparseable_reply_is_500(client, fake_llm):
    fake_llm.reply = "Sorry, I can't do that."
    response = await client.post("/api/generate", json={"title": "T", "description": "D"})
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to generate SOP"


# ═══════════════════════════════════════════════════════
# SOP CRUD
# ═══════════════════════════════════════════════════════


async def _create_sop(client, **overrides):
    body = {
        "title": fake.sentence(nb_words=4),
        "description": fake.paragraph(nb_sentences=2),
        "content": {"purpose": "Keep things tidy", "procedures": [{"step": 1, "action": "Tidy"}]},
    }
    body.update(overrides)
    response = await client.post("/api/sops", json=body)
    assert response.status_code == 200
    return response.json()


@pytest.mark.anyio
async def test_create_sop_defaults_and_camel_case(client):
    created = await _create_sop(client, regulatoryFramework=["ISO 9001", "GMP"], category="QA")

    assert created["status"] == "draft"
    assert created["version"] == "1.0"
    assert created["industry"] == "general"
    assert created["regulatoryFramework"] == "ISO 9001, GMP"
    assert "createdAt" in created and "updatedAt" in created
    assert json.loads(created["content"])["procedures"][0]["action"] == "Tidy"


@pytest.mark.anyio
async def test_create_sop_accepts_string_content(client):
    created = await _create_sop(client, content='{"purpose": "as text"}')
    assert created["content"] == '{"purpose": "as text"}'


@pytest.mark.anyio
async def test_create_sop_without_title_is_400(client):
    response = await client.post("/api/sops", json={"description": "no title"})
    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.anyio
async def test_list_sops_search_and_category(client):
    target = await _create_sop(client, title="Forklift pre-shift inspection", category="Warehouse")
    await _create_sop(client, title="Expense approval", category="Finance")

    response = await client.get("/api/sops", params={"search": "FORKLIFT"})
    assert [s["id"] for s in response.json()] == [target["id"]]

    response = await client.get("/api/sops", params={"category": "Finance"})
    assert [s["title"] for s in response.json()] == ["Expense approval"]

    response = await client.get("/api/sops")
    assert len(response.json()) == 2


@pytest.mark.anyio
async def test_get_update_delete_sop(client):
    created = await _create_sop(client, category="Ops")
    sop_id = created["id"]

    response = await client.get(f"/api/sops/{sop_id}")
    assert response.status_code == 200
    assert response.json()["title"] == created["title"]

    response = await client.put(
        f"/api/sops/{sop_id}",
        json={"status": "approved", "version": "1.1", "content": {"purpose": "Updated"}},
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["status"] == "approved"
    assert updated["version"] == "1.1"
    assert updated["category"] == "Ops"
    assert updated["description"] == created["description"]
    assert json.loads(updated["content"]) == {"purpose": "Updated"}

    response = await client.delete(f"/api/sops/{sop_id}")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    response = await client.get(f"/api/sops/{sop_id}")
    assert response.status_code == 404
    assert response.json() == {"error": "SOP not found"}


@pytest.mark.anyio
@pytest.mark.parametrize("method", ["get", "put", "delete"])
async def test_missing_sop_is_404(client, method):
    kwargs = {"json": {"title": "x"}} if method == "put" else {}
    response = await getattr(client, method)("/api/sops/does-not-exist", **kwargs)
    assert response.status_code == 404
    assert response.json() == {"error": "SOP not found"}


# ═══════════════════════════════════════════════════════
# EXPORTS
# ═══════════════════════════════════════════════════════


@pytest.mark.anyio
@pytest.mark.parametrize(
    "suffix, media_type, filename_tail, magic",
    [
        ("", "application/pdf", "_v1.0.pdf", b"%PDF"),
        ("/docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document", "_v1.0.docx", b"PK"),
        ("/html", "text/html", "_v1.0.html", b"<!DOCTYPE html>"),
        ("/xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", "_checklist_v1.0.xlsx", b"PK"),
    ],
)
async def test_export_downloads(client, suffix, media_type, filename_tail, magic):
    created = await _create_sop(client, title="Line Clearance")
    response = await client.get(f"/api/export/{created['id']}{suffix}")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith(media_type)
    assert response.headers["content-disposition"] == f'attachment; filename="line_clearance{filename_tail}"'
    assert response.content.startswith(magic)


@pytest.mark.anyio
@pytest.mark.parametrize("suffix", ["", "/docx", "/html", "/xlsx"])
async def test_export_missing_sop_is_404(client, suffix):
    response = await client.get(f"/api/export/missing{suffix}")
    assert response.status_code == 404
    assert response.json() == {"error": "SOP not found"}


@pytest.mark.anyio
@pytest.mark.parametrize(
    "suffix, message",
    [
        ("", "Failed to generate PDF"),
        ("/docx", "Failed to export SOP as Word document"),
        ("/html", "Failed to export SOP as HTML"),
        ("/xlsx", "Failed to export SOP as Excel checklist"),
    ],
)
async def test_export_failures_are_500(client, suffix, message):
    created = await _create_sop(client, content="{broken json")
    response = await client.get(f"/api/export/{created['id']}{suffix}")
    assert response.status_code == 500
    assert response.json() == {"error": message}


# ═══════════════════════════════════════════════════════
# PERSONAS
# ═══════════════════════════════════════════════════════


async def _create_persona(client, **overrides):
    body = {
        "name": fake.name(),
        "occupation": fake.job(),
        "age": 44,
        "background": fake.paragraph(nb_sentences=2),
        "voiceProfile": {"speakingStyle": "Measured", "catchphrases": ["Let's be clear"]},
        "beliefs": json.dumps({"philosophy": "Evidence first"}),
        "category": "custom",
        "tags": ["analyst"],
    }
    body.update(overrides)
    response = await client.post("/api/personas", json=body)
    assert response.status_code == 200
    return response.json()


@pytest.mark.anyio
async def test_create_persona(client):
    persona = await _create_persona(client)
    assert persona["isPrebuilt"] is False
    assert persona["usageCount"] == 0
    assert json.loads(persona["voiceProfile"])["speakingStyle"] == "Measured"
    assert json.loads(persona["beliefs"]) == {"philosophy": "Evidence first"}
    assert persona["tags"] == "analyst"


@pytest.mark.anyio
async def test_create_persona_requires_name(client):
    response = await client.post("/api/personas", json={"occupation": "Ghost"})
    assert response.status_code == 400
    assert response.json() == {"error": "Name is required"}


@pytest.mark.anyio
async def test_seed_and_filter_personas(client):
    response = await client.post("/api/personas/seed")
    assert response.status_code == 200
    assert response.json()["created"] == len(PREBUILT_PERSONAS)

    again = await client.post("/api/personas/seed")
    assert again.json()["created"] == 0

    await _create_persona(client, category="custom")

    response = await client.get("/api/personas", params={"isPrebuilt": "true"})
    names = {p["name"] for p in response.json()}
    assert names == {p["name"] for p in PREBUILT_PERSONAS}

    response = await client.get("/api/personas", params={"isPrebuilt": "false"})
    assert len(response.json()) == 1

    response = await client.get("/api/personas", params={"category": "editorial"})
    assert len(response.json()) == len(PREBUILT_PERSONAS)
    assert response.json()[0]["_count"] == {"responses": 0, "scenarios": 0}


@pytest.mark.anyio
async def test_persona_detail_update_delete(client):
    persona = await _create_persona(client, description="Before")
    persona_id = persona["id"]

    response = await client.put(f"/api/personas/{persona_id}", json={"occupation": "Editor", "isPrebuilt": True})
    assert response.status_code == 200
    updated = response.json()
    assert updated["occupation"] == "Editor"
    assert updated["description"] == "Before"
    assert updated["isPrebuilt"] is False

    response = await client.get(f"/api/personas/{persona_id}")
    assert response.status_code == 200
    detail = response.json()
    assert detail["responses"] == [] and detail["scenarios"] == []

    response = await client.delete(f"/api/personas/{persona_id}")
    assert response.json() == {"success": True}
    response = await client.get(f"/api/personas/{persona_id}")
    assert response.status_code == 404
    assert response.json() == {"error": "Persona not found"}


@pytest.mark.anyio
async def test_persona_generate_saves_response(client, fake_llm):
    persona = await _create_persona(client, name="Ada Lovelace")
    fake_llm.reply = "The Analytical Engine weaves algebraic patterns."

    response = await client.post(
        f"/api/personas/{persona['id']}/generate",
        json={
            "prompt": "Describe your work",
            "contentType": "article",
            "targetAudience": "students",
            "conversationHistory": [
                {"role": "user", "content": "Hello"},
                {"role": "assistant", "content": "Good day"},
            ],
        },
    )
    assert response.status_code == 200
    assert response.json() == {"response": "The Analytical Engine weaves algebraic patterns."}

    messages = fake_llm.calls[0]["messages"]
    assert messages[0]["content"].startswith("You are Ada Lovelace")
    assert "Content Type: article" in messages[0]["content"]
    assert [m["role"] for m in messages[1:]] == ["user", "assistant", "user"]

    detail = (await client.get(f"/api/personas/{persona['id']}")).json()
    assert detail["usageCount"] == 1
    assert detail["lastUsed"] is not None
    assert detail["responses"][0]["contentType"] == "article"
    assert detail["responses"][0]["targetAudience"] == "students"

    listing = (await client.get("/api/personas")).json()
    assert listing[0]["_count"]["responses"] == 1


@pytest.mark.anyio
async def test_persona_generate_without_saving(client, fake_llm):
    persona = await _create_persona(client)
    fake_llm.reply = "Unsaved"
    response = await client.post(
        f"/api/personas/{persona['id']}/generate", json={"prompt": "Hi", "saveResponse": False}
    )
    assert response.json() == {"response": "Unsaved"}
    detail = (await client.get(f"/api/personas/{persona['id']}")).json()
    assert detail["responses"] == []
    assert detail["usageCount"] == 0


@pytest.mark.anyio
async def test_persona_generate_errors(client, fake_llm):
    persona = await _create_persona(client)

    response = await client.post(f"/api/personas/{persona['id']}/generate", json={"prompt": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "Prompt is required"}

    response = await client.post("/api/personas/missing/generate", json={"prompt": "Hi"})
    assert response.status_code == 404
    assert response.json() == {"error": "Persona not found"}

    fake_llm.reply = LLMClientError("LLM request failed: boom")
    response = await client.post(f"/api/personas/{persona['id']}/generate", json={"prompt": "Hi"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate response"}


@pytest.mark.anyio
async def test_persona_scenario_is_recorded(client, fake_llm):
    persona = await _create_persona(client)
    fake_llm.reply = "Deep breath. We handle this together."

    response = await client.post(
        f"/api/personas/{persona['id']}/scenarios",
        json={"scenarioType": "crisis", "emotionalState": "anxious", "stressLevel": 8},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["response"] == "Deep breath. We handle this together."
    assert data["scenario"]["scenarioType"] == "crisis"
    assert data["scenario"]["stressLevel"] == 8

    user_prompt = fake_llm.calls[0]["messages"][-1]["content"]
    assert user_prompt.splitlines() == [
        "Respond to this crisis scenario",
        "Current emotional state: anxious",
        "(Stress Level: 8/10)",
    ]

    detail = (await client.get(f"/api/personas/{persona['id']}")).json()
    assert len(detail["scenarios"]) == 1
    assert detail["usageCount"] == 1


@pytest.mark.anyio
async def test_persona_scenario_requires_type(client):
    persona = await _create_persona(client)
    response = await client.post(f"/api/personas/{persona['id']}/scenarios", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Scenario type is required"}
