# Generator package

# Makes generate/ importable and exposes key interfaces.

from .generator import DialogGenerator, InstructionGenerator, parse_envelope
from .types import (
    CHECKLIST_KEYS,
    REQUIRED_CHECKLIST_KEYS,
    DialogChecklist,
    DialogEnvelope,
    Message,
    ModelParams,
)
from .clients.echo_dev_client import EchoDevClient

__all__ = [
    "DialogGenerator",
    "InstructionGenerator",
    "parse_envelope",
    "CHECKLIST_KEYS",
    "REQUIRED_CHECKLIST_KEYS",
    "DialogChecklist",
    "DialogEnvelope",
    "Message",
    "ModelParams",
    "EchoDevClient",
]
