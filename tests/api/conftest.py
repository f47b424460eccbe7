"""Shared test fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from interview_copilot.api.main import create_app
from interview_copilot.core.config import CopilotConfig
from tests.mocks.mock_provider import ScriptedAdapter, interview_reply


@pytest.fixture
def groq_adapter():
    return ScriptedAdapter(name="groq", script=[interview_reply("I designed our event pipeline.")])


@pytest.fixture
def gemini_adapter():
    return ScriptedAdapter(name="gemini", script=[interview_reply("Gemini says hello.")])


@pytest.fixture
def pipeline(make_pipeline, groq_adapter, gemini_adapter):
    return make_pipeline(groq_adapter, gemini_adapter)


@pytest.fixture
def client(pipeline, monkeypatch):
    """Test client around a pipeline of scripted adapters."""
    monkeypatch.delenv("COPILOT_PROVIDER", raising=False)
    with TestClient(create_app(pipeline=pipeline, config=CopilotConfig())) as test_client:
        yield test_client


@pytest.fixture
def sample_answer_request():
    return {"question": "Tell me about a system you designed.", "provider": "groq"}
