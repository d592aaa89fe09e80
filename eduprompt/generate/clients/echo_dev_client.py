# Dummy model client for local dev and testing without API calls.

import json
from typing import List, Tuple, Dict, Any

from ..types import DialogChecklist, Message, ModelParams


class EchoDevClient:
    def __init__(self):
        self.model = "echo-dev"

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        user_inputs = [m.content for m in messages if m.role == "user"]
        echoed = user_inputs[-1] if user_inputs else "(no user input)"
        if params.json_mode:
            text = json.dumps({
                "reply": f"[ECHO RESPONSE] {echoed}",
                "checklist": DialogChecklist.empty().model_dump(exclude_none=True),
            })
        else:
            text = f"[ECHO RESPONSE]\n{echoed}"
        meta = {"engine": "echo", "model": "echo-dev", "temp": params.temperature, "max_tokens": params.max_tokens}
        return text, meta
