import json
from types import SimpleNamespace

import httpx
import openai
import pytest
import requests

from eduprompt.errors import UpstreamError
from eduprompt.generate.clients import ollama_client
from eduprompt.generate.clients.ollama_client import OllamaClient
from eduprompt.generate.clients.openai_client import OpenAIClient
from eduprompt.generate.types import Message, ModelParams

IMAGE = "data:image/png;base64,iVBORw0KGgo="
OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def _openai_with(create) -> OpenAIClient:
    oc = OpenAIClient(model="gpt-4o", api_key="sk-test")
    oc.client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return oc


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])

# ------------------------------------------------------------
# OpenAI
# ------------------------------------------------------------

def test_openai_formats_images_and_json_mode():
    captured = {}

    def create(**kwargs):
        captured.update(kwargs)
        return _completion('  {"reply": "?"}  ')

    oc = _openai_with(create)
    text, meta = oc.generate(
        [Message(role="system", content="rules"), Message(role="user", content="Schau", image=IMAGE)],
        ModelParams(temperature=0.3, max_tokens=500, json_mode=True),
    )

    assert text == '{"reply": "?"}'
    assert meta == {"engine": "openai", "model": "gpt-4o"}
    assert captured["response_format"] == {"type": "json_object"}
    assert captured["messages"][0] == {"role": "system", "content": "rules"}
    assert captured["messages"][1]["content"] == [
        {"type": "text", "text": "Schau"},
        {"type": "image_url", "image_url": {"url": IMAGE}},
    ]


def test_openai_plain_text_mode_and_empty_content():
    captured = {}

    def create(**kwargs):
        captured.update(kwargs)
        return _completion(None)

    text, _ = _openai_with(create).generate([Message(role="user", content="x")], ModelParams(temperature=0.0))

    assert text == ""
    assert "response_format" not in captured
    assert captured["temperature"] == 0.0


def test_openai_status_error_maps_to_upstream_error():
    def create(**kwargs):
        response = httpx.Response(401, request=httpx.Request("POST", OPENAI_URL))
        raise openai.AuthenticationError(
            "Error code: 401", response=response, body={"message": "Incorrect API key provided"}
        )

    with pytest.raises(UpstreamError) as exc_info:
        _openai_with(create).generate([Message(role="user", content="x")], ModelParams())

    assert exc_info.value.upstream_status == 401
    assert exc_info.value.upstream_message == "Incorrect API key provided"


def test_openai_connection_error_has_no_status():
    def create(**kwargs):
        raise openai.APIConnectionError(request=httpx.Request("POST", OPENAI_URL))

    with pytest.raises(UpstreamError) as exc_info:
        _openai_with(create).generate([Message(role="user", content="x")], ModelParams())

    assert exc_info.value.upstream_status is None

# ------------------------------------------------------------
# Ollama
# ------------------------------------------------------------

def _response(status: int, body: bytes) -> requests.Response:
    r = requests.Response()
    r.status_code = status
    r._content = body
    return r


def test_ollama_payload_carries_system_images_and_format(monkeypatch):
    captured = {}

    def fake_post(url, json=None, timeout=None):
        captured["url"] = url
        captured["payload"] = json
        return _response(200, b'{"response": " {\\"reply\\": \\"?\\"} "}')

    monkeypatch.setattr(ollama_client.requests, "post", fake_post)
    client = OllamaClient(model="llava:7b", host="http://ollama:11434/")

    text, meta = client.generate(
        [Message(role="system", content="rules"), Message(role="user", content="Bild", image=IMAGE)],
        ModelParams(temperature=0.3, max_tokens=500, json_mode=True),
    )

    assert text == '{"reply": "?"}'
    assert meta["engine"] == "ollama"
    payload = captured["payload"]
    assert captured["url"] == "http://ollama:11434/api/generate"
    assert payload["system"] == "rules"
    assert payload["images"] == ["iVBORw0KGgo="]
    assert payload["format"] == "json"
    assert "SYSTEM" not in payload["prompt"]
    assert payload["prompt"].startswith("USER:\nBild")
    assert payload["options"] == {"temperature": 0.3, "num_predict": 500}


def test_ollama_http_error(monkeypatch):
    monkeypatch.setattr(ollama_client.requests, "post", lambda *a, **k: _response(503, b"model loading"))

    with pytest.raises(UpstreamError) as exc_info:
        OllamaClient().generate([Message(role="user", content="x")], ModelParams())

    assert exc_info.value.upstream_status == 503
    assert exc_info.value.upstream_message == "model loading"


def test_ollama_unreachable(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(ollama_client.requests, "post", fake_post)

    with pytest.raises(UpstreamError) as exc_info:
        OllamaClient().generate([Message(role="user", content="x")], ModelParams())

    assert exc_info.value.upstream_status is None


def test_echo_client_json_mode_is_valid_envelope():
    from eduprompt.generate import EchoDevClient

    text, _ = EchoDevClient().generate([Message(role="user", content="hi")], ModelParams(json_mode=True))
    data = json.loads(text)
    assert data["reply"].endswith("hi")
    assert set(data["checklist"]) == {"thema", "zielgruppe", "rolleKi", "ausgabeformat", "lerneffekt"}
