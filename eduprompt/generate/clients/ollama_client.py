# Client for Ollama local inference.
# Accepts a model name and exposes generate(messages, params).

import requests
from typing import List, Tuple, Dict, Any

from eduprompt.errors import UpstreamError
from eduprompt.log import get_logger
from ..types import Message, ModelParams

logger = get_logger("eduprompt.ollama")


def _strip_data_uri(image: str) -> str:
    """Ollama wants the bare base64 payload, not data:<mime>;base64,<payload>."""
    if image.startswith("data:") and "," in image:
        return image.split(",", 1)[1]
    return image


class OllamaClient:
    def __init__(self, model: str = "llava:7b", host: str = "http://localhost:11434"):
        self.model = model
        self.host = host.rstrip("/")

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        system = "\n\n".join(m.content.strip() for m in messages if m.role == "system")
        turns = [m for m in messages if m.role != "system"]
        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": self._compose_prompt(turns),
            "system": system,
            "stream": False,
            "options": {
                "temperature": float(params.temperature if params.temperature is not None else 0.3),
                "num_predict": int(params.max_tokens or 1000),
            },
        }
        images = [_strip_data_uri(m.image) for m in turns if m.image]
        if images:
            payload["images"] = images
        if params.json_mode:
            payload["format"] = "json"

        url = f"{self.host}/api/generate"
        try:
            resp = requests.post(url, json=payload, timeout=180)
            resp.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            body = e.response.text if e.response is not None else ""
            logger.error("Ollama error %s: %s", status, body)
            raise UpstreamError("Ollama error.", upstream_status=status, upstream_message=body or None) from e
        except requests.RequestException as e:
            logger.error("Ollama unreachable at %s: %s", url, e)
            raise UpstreamError("Ollama unreachable.") from e

        data = resp.json()
        return (data.get("response") or "").strip(), {"engine": "ollama", "model": self.model}

    def _compose_prompt(self, messages: List[Message]) -> str:
        parts = []
        for m in messages:
            parts.append(f"{m.role.upper()}:\n{m.content.strip()}\n")
        parts.append("ASSISTANT:\n")
        return "\n".join(parts)
