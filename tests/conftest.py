"""Common test fixtures for the dynamic UI agent tests."""

import json
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from dynui.agent.models import AgentConfig, LLMConfig, SamplingParams
from dynui.api.deps import get_backend
from dynui.api.main import app
from dynui.core.config import get_settings


class FakeBackend:
    """Generation backend returning a canned result or raising an error."""

    def __init__(self, result: Any = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def generate(
        self,
        messages: list[dict[str, str]],
        schema: dict[str, Any],
        params: SamplingParams,
    ) -> Any:
        self.calls.append({"messages": messages, "schema": schema, "params": params})
        if self.error is not None:
            raise self.error
        return self.result


def make_tool_call_response(arguments: Optional[str]) -> MagicMock:
    """Create a mock chat completion with one emit_response tool call."""
    tool_call = MagicMock()
    tool_call.function.name = "emit_response"
    tool_call.function.arguments = arguments
    mock_response = MagicMock()
    mock_response.choices = [MagicMock(message=MagicMock(tool_calls=[tool_call]))]
    return mock_response


def make_config(backend: FakeBackend, **kwargs) -> AgentConfig:
    """Create an agent config bound to a fake backend."""
    llm = kwargs.pop("llm", None) or LLMConfig()
    llm.backend = backend
    return AgentConfig(llm=llm, **kwargs)


LOGIN_FORM_RESPONSE = {
    "title": "Sign in",
    "ui": [
        {
            "kind": "container",
            "props": {"direction": "column"},
            "children": [
                {"kind": "heading", "props": {"text": "Welcome back", "level": 1}},
                {
                    "kind": "form",
                    "props": {
                        "fields": [
                            {"kind": "input", "props": {"name": "email", "inputType": "email"}},
                            {"kind": "input", "props": {"name": "password", "inputType": "password"}},
                        ],
                        "submitLabel": "Sign in",
                        "actionId": "login",
                    },
                },
                {"kind": "button", "props": {"label": "Learn more", "variant": "secondary"}},
            ],
        }
    ],
    "actions": [{"id": "login", "type": "submit", "label": "Sign in"}],
    "suggestions": ["Add social login"],
}


@pytest.fixture
def login_form_response() -> dict:
    """Raw backend output for a login form (deep copy per test)."""
    return json.loads(json.dumps(LOGIN_FORM_RESPONSE))


@pytest.fixture
def mock_settings(monkeypatch):
    """Settings with a test API key."""
    monkeypatch.setenv("LLM_API_KEY", "test-key")
    monkeypatch.setenv("LLM_MODEL", "test-model")
    # Clear cached settings to pick up new env vars
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def no_api_key(monkeypatch):
    """Settings without an API key."""
    monkeypatch.setenv("LLM_API_KEY", "")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_backend(login_form_response) -> FakeBackend:
    """Backend that returns the login form response."""
    return FakeBackend(result=login_form_response)


@pytest.fixture
def client(fake_backend):
    """Create test client with the fake backend."""
    app.dependency_overrides[get_backend] = lambda: fake_backend
    yield TestClient(app)
    app.dependency_overrides.clear()
