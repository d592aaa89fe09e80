# Client-side conversation state: turns, checklist, structured context.

from .context import StructuredContext, build_context_turn
from .store import GENERATION_THRESHOLD, INITIAL_GREETING, ConversationStore
from .turns import Turn

__all__ = [
    "StructuredContext",
    "build_context_turn",
    "GENERATION_THRESHOLD",
    "INITIAL_GREETING",
    "ConversationStore",
    "Turn",
]
