import json

import pytest
from fastapi.testclient import TestClient

from eduprompt.app import app
from eduprompt.dependencies import get_model_client
from eduprompt.settings import settings


class ScriptedClient:
    """Model client that replays canned outputs and records every call."""

    def __init__(self, *outputs):
        self.outputs = list(outputs)
        self.calls = []

    def generate(self, messages, params):
        self.calls.append((messages, params))
        out = self.outputs.pop(0) if len(self.outputs) > 1 else self.outputs[0]
        if isinstance(out, Exception):
            raise out
        if isinstance(out, dict):
            out = json.dumps(out)
        return out, {"engine": "scripted"}

    @property
    def last_messages(self):
        return self.calls[-1][0]

    @property
    def last_params(self):
        return self.calls[-1][1]


@pytest.fixture(autouse=True)
def openai_configured(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(settings, "USE_ECHO", False)
    monkeypatch.setattr(settings, "USE_OLLAMA", False)


@pytest.fixture()
def scripted():
    """Install a ScriptedClient as the app's model client."""
    def install(*outputs):
        model_client = ScriptedClient(*outputs)
        app.dependency_overrides[get_model_client] = lambda: model_client
        return model_client

    yield install
    app.dependency_overrides.clear()


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)
