# Dialog and instruction generators.
# Both accept any model client (OpenAI, Ollama, Echo), prepend a fixed policy
# preamble to the supplied history and hold no state between calls.

from __future__ import annotations
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from eduprompt.errors import InvalidConversationError, MalformedPayloadError, UpstreamError
from eduprompt.log import get_logger
from .prompts import SYNTHESIS_PROMPT, build_dialog_prompt
from .types import DialogChecklist, DialogEnvelope, Message, ModelParams

logger = get_logger("eduprompt.generator")

DEFAULT_CONFIG_PATH = Path(__file__).resolve().with_name("config.yaml")

FALLBACK_REPLY_PREFIX = "Es gab einen Fehler beim Verarbeiten der Antwort. "

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def load_config(config_path: str | os.PathLike = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    if not os.path.exists(config_path):
        return {}
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_envelope(raw: str) -> DialogEnvelope:
    """Parse model output into a DialogEnvelope or raise MalformedPayloadError."""
    text = raw.strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(raw, f"not JSON: {e}") from e
    try:
        return DialogEnvelope.model_validate(data)
    except ValidationError as e:
        raise MalformedPayloadError(raw, f"wrong shape: {e.error_count()} error(s)") from e


def fallback_envelope(raw: str) -> DialogEnvelope:
    return DialogEnvelope(reply=FALLBACK_REPLY_PREFIX + raw, checklist=DialogChecklist.empty())


class _Generator:
    section = ""

    def __init__(self, model_client, config_path: str | os.PathLike = DEFAULT_CONFIG_PATH):
        self.model_client = model_client
        self.cfg = load_config(config_path).get(self.section, {})

    def _params(self, default_temperature: float, default_max_tokens: int, json_mode: bool = False) -> ModelParams:
        return ModelParams(
            temperature=self.cfg.get("temperature", default_temperature),
            max_tokens=self.cfg.get("max_tokens", default_max_tokens),
            json_mode=json_mode,
        )


class DialogGenerator(_Generator):
    """Advances the clarifying-question dialog and recomputes the checklist."""

    section = "dialog"
    empty_message = "Keine Nachrichten übermittelt."

    def turn(self, history: List[Message]) -> DialogEnvelope:
        if not history:
            raise InvalidConversationError(self.empty_message)

        messages = [Message(role="system", content=build_dialog_prompt()), *history]
        params = self._params(0.3, 500, json_mode=True)

        try:
            text, meta = self.model_client.generate(messages, params)
        except UpstreamError as e:
            if e.upstream_status is not None:
                raise UpstreamError(
                    "Fehler von der OpenAI API.",
                    status_code=e.upstream_status,
                    upstream_status=e.upstream_status,
                    upstream_message=e.upstream_message,
                ) from e
            raise UpstreamError("Ein interner Serverfehler ist aufgetreten.") from e

        if not text:
            raise UpstreamError("Leere Antwort von der OpenAI API.")

        try:
            envelope = parse_envelope(text)
        except MalformedPayloadError as e:
            logger.warning("Unparseable dialog reply (%s): %s", e.reason, e.raw)
            return fallback_envelope(e.raw)

        logger.debug("Dialog turn via %s: %s", meta.get("engine"), envelope.checklist)
        return envelope


class InstructionGenerator(_Generator):
    """Distills a finished dialog into one directly usable instruction text."""

    section = "instruction"
    empty_message = "Invalid chat."

    def generate(self, history: List[Message]) -> str:
        if not history:
            raise InvalidConversationError(self.empty_message)

        # images are not reused for the final instruction
        turns = [Message(role=m.role, content=m.content) for m in history]
        messages = [Message(role="system", content=SYNTHESIS_PROMPT), *turns]
        params = self._params(0.2, 800)

        try:
            text, _meta = self.model_client.generate(messages, params)
        except UpstreamError as e:
            if e.upstream_status is not None:
                raise UpstreamError(
                    e.upstream_message or "OpenAI API error.",
                    upstream_status=e.upstream_status,
                    upstream_message=e.upstream_message,
                ) from e
            raise UpstreamError("Server error.") from e

        if not text:
            logger.warning("Instruction synthesis returned an empty result")
        return text
