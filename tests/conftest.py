import json

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient

from sop_studio.api.dependencies import get_llm_client, get_session
from sop_studio.api.server import app
from sop_studio.errors import LLMClientError
from sop_studio.storage.database import build_engine, get_session_factory, init_db

fake = Faker()

SAMPLE_SOP = {
    "purpose": "Ensure lab glassware is cleaned consistently before every assay.",
    "scope": "Applies to all laboratory technicians handling reusable glassware.",
    "responsibilities": ["Technician: performs the cleaning", "Supervisor: verifies the log"],
    "procedures": [
        {"step": 1, "action": "Rinse", "details": "Rinse glassware with tap water to remove residue."},
        {
            "step": 2,
            "action": "Soak",
            "details": "Soak in detergent solution for 30 minutes.",
            "warning": "Wear nitrile gloves <always> & goggles",
        },
        {"step": 3, "action": "Dry", "details": "Air dry on the rack."},
    ],
    "safetyNotes": ["Detergent is an eye irritant"],
    "references": ["Lab Safety Manual v4"],
    "acceptanceCriteria": ["No visible residue", "Cleaning log signed"],
}


class FakeLLM:
    """Stands in for ChatClient; records every call and returns ``reply``."""

    def __init__(self, reply=None):
        self.reply = json.dumps(SAMPLE_SOP) if reply is None else reply
        self.calls = []

    def complete(self, messages, *, temperature=0.7, max_tokens=1000, timeout=None):
        self.calls.append({"messages": messages, "temperature": temperature, "max_tokens": max_tokens})
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield get_session_factory(engine)
    engine.dispose()


@pytest.fixture
def session(session_factory):
    s = session_factory()
    yield s
    s.close()


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def failing_llm():
    return FakeLLM(reply=LLMClientError("LLM request failed: HTTP 503 Service Unavailable"))


@pytest.fixture
def sop_payload():
    return json.loads(json.dumps(SAMPLE_SOP))


@pytest.fixture
async def client(session_factory, fake_llm):
    """Async HTTP client bound to an in-memory database and the fake LLM."""

    def _session():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
