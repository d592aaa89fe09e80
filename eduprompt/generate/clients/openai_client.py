# Client for the OpenAI Chat Completions API.
# Same interface as OllamaClient and EchoDevClient: generate(messages, params).

from typing import Any, Dict, List, Tuple

import openai
from openai import OpenAI

from eduprompt.errors import UpstreamError
from eduprompt.log import get_logger
from ..types import Message, ModelParams

logger = get_logger("eduprompt.openai")


def _format_message(m: Message) -> Dict[str, Any]:
    if m.image:
        return {
            "role": m.role,
            "content": [
                {"type": "text", "text": m.content},
                {"type": "image_url", "image_url": {"url": m.image}},
            ],
        }
    return {"role": m.role, "content": m.content}


def _error_message(exc: openai.APIStatusError) -> str | None:
    """Pull the upstream-provided message out of an error response body."""
    body = exc.body
    if isinstance(body, dict):
        msg = body.get("message")
        if msg is None and isinstance(body.get("error"), dict):
            msg = body["error"].get("message")
        if msg:
            return str(msg)
    return None


class OpenAIClient:
    def __init__(self, model: str = "gpt-4o", api_key: str | None = None):
        self.model = model
        self.client = OpenAI(api_key=api_key)

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        formatted = [_format_message(m) for m in messages]
        extra: Dict[str, Any] = {}
        if params.json_mode:
            extra["response_format"] = {"type": "json_object"}
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=formatted,
                temperature=params.temperature if params.temperature is not None else 0.3,
                max_tokens=params.max_tokens or 1000,
                **extra,
            )
        except openai.APIStatusError as e:
            logger.error("OpenAI API error %s: %s", e.status_code, e.message)
            raise UpstreamError(
                "OpenAI API error.",
                upstream_status=e.status_code,
                upstream_message=_error_message(e),
            ) from e
        except openai.APIConnectionError as e:
            logger.error("OpenAI API unreachable: %s", e)
            raise UpstreamError("OpenAI API unreachable.") from e

        content = resp.choices[0].message.content if resp.choices else None
        text = (content or "").strip()
        meta = {"engine": "openai", "model": self.model}
        return text, meta
