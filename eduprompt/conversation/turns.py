from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Turn:
    """One message of the dialog. image is a data URI, at most one per turn."""
    role: str
    content: str
    image: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"role": self.role, "content": self.content}
        if self.image:
            payload["imageBase64"] = self.image
        return payload
