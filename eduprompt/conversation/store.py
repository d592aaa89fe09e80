# In-memory conversation state held by the client.
# One owner mutates it; nothing is persisted and reset() starts over.

from __future__ import annotations
from typing import Dict, List, Mapping, Optional, Tuple

from eduprompt.generate.types import CHECKLIST_KEYS
from .context import StructuredContext, build_context_turn
from .turns import Turn

INITIAL_GREETING = (
    "Hallo! Beschreibe, was die KI in deinem Unterricht tun soll, oder fülle die "
    "Felder oben aus, um den Prozess zu beschleunigen."
)

# Minimum number of satisfied checklist items before synthesis is offered.
GENERATION_THRESHOLD = 4


def empty_checklist() -> Dict[str, bool]:
    return {key: False for key in CHECKLIST_KEYS}


class ConversationStore:
    def __init__(self, greeting: str = INITIAL_GREETING):
        self.greeting = greeting
        self.reset()

    # -------------------------
    # State
    # -------------------------
    @property
    def turns(self) -> Tuple[Turn, ...]:
        return self._turns

    @property
    def checklist(self) -> Dict[str, bool]:
        return dict(self._checklist)

    @property
    def context(self) -> StructuredContext:
        return self._context

    @property
    def context_injected(self) -> bool:
        return self._context_injected

    @property
    def checked_count(self) -> int:
        return sum(1 for v in self._checklist.values() if v)

    @property
    def generation_enabled(self) -> bool:
        return self.checked_count >= GENERATION_THRESHOLD

    # -------------------------
    # Operations
    # -------------------------
    def append_turn(self, turn: Turn) -> Tuple[Turn, ...]:
        self._turns = self._turns + (turn,)
        return self._turns

    def merge_checklist(self, partial: Optional[Mapping[str, object]]) -> Dict[str, bool]:
        """Shallow overwrite of the known keys present in partial."""
        for key, value in (partial or {}).items():
            if key in self._checklist and isinstance(value, bool):
                self._checklist[key] = value
        return self.checklist

    def set_context(self, context: StructuredContext) -> None:
        self._context = context

    def reset(self) -> None:
        self._turns: Tuple[Turn, ...] = (Turn(role="assistant", content=self.greeting),)
        self._checklist: Dict[str, bool] = empty_checklist()
        self._context = StructuredContext()
        self._context_injected = False

    def submit_user_turn(self, content: str, image: Optional[str] = None) -> List[Turn]:
        """Append a user turn (plus the one-time context turn) and return the history to send.

        Blank text without an image appends nothing and returns [].
        """
        if not content.strip() and not image:
            return []
        if not self._context_injected and not self._has_user_turn():
            context_turn = build_context_turn(self._context)
            if context_turn is not None:
                self.append_turn(context_turn)
                self._context_injected = True
        self.append_turn(Turn(role="user", content=content, image=image))
        return list(self._turns)

    def generation_payload(self) -> List[Turn]:
        """History for instruction synthesis; adds the context turn if it was never sent."""
        turns = list(self._turns)
        if not self._context_injected:
            context_turn = build_context_turn(self._context)
            if context_turn is not None:
                turns.insert(1, context_turn)
        return turns

    def _has_user_turn(self) -> bool:
        return any(t.role == "user" for t in self._turns)
