from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .turns import Turn

CONTEXT_HEADER = "Hier sind einige strukturierte Informationen zum Unterrichtskontext:"


@dataclass(frozen=True)
class StructuredContext:
    """Optional up-front lesson context, entered once before the dialog."""
    grade_level: str = ""
    subject: str = ""
    learning_goal: str = ""
    duration: str = ""

    def items(self) -> List[Tuple[str, str]]:
        """Labelled non-blank fields, in display order."""
        labelled = [
            ("Klassenstufe", self.grade_level),
            ("Fach", self.subject),
            ("Lernziel", self.learning_goal),
            ("Dauer der Aktivität", self.duration),
        ]
        return [(label, value.strip()) for label, value in labelled if value and value.strip()]

    def is_empty(self) -> bool:
        return not self.items()


def build_context_turn(context: Optional[StructuredContext]) -> Optional[Turn]:
    """Render the context as one synthetic user turn, or None if nothing is set."""
    if context is None:
        return None
    items = context.items()
    if not items:
        return None
    lines = [CONTEXT_HEADER]
    lines.extend(f"- {label}: {value}" for label, value in items)
    return Turn(role="user", content="\n".join(lines) + "\n")
