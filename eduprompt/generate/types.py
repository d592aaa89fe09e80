# Typed structures shared across generator modules.

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

from pydantic import BaseModel

# Checklist keys and what the dialog model must have learned for each.
CHECKLIST_CRITERIA: Dict[str, str] = {
    "thema": "Das allgemeine Thema, die Aufgabe oder die zu bearbeitende Ressource ist klar.",
    "zielgruppe": "Die Klassenstufe oder die konkrete Zielgruppe der Schülerinnen und Schüler ist bekannt.",
    "rolleKi": "Die Rolle oder Persona der KI (z.B. Tutor, Debattenpartner, Kritiker) ist beschrieben.",
    "ausgabeformat": "Das gewünschte Format der KI-Antworten (z.B. Liste, Tabelle, Fliesstext, Code) ist festgelegt.",
    "lerneffekt": "Das pädagogische Ziel bzw. der angestrebte Lerneffekt ist klar.",
    "material": "Es ist geklärt, ob und welche Unterrichtsmaterialien die KI verwenden soll.",
}
REQUIRED_CHECKLIST_KEYS = ("thema", "zielgruppe", "rolleKi", "ausgabeformat", "lerneffekt")
OPTIONAL_CHECKLIST_KEYS = ("material",)
CHECKLIST_KEYS = REQUIRED_CHECKLIST_KEYS + OPTIONAL_CHECKLIST_KEYS


@dataclass
class Message:
    """Single chat turn: system, user, or assistant. image is a data URI."""
    role: str
    content: str
    image: Optional[str] = None


@dataclass
class ModelParams:
    """LLM parameters per request."""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    json_mode: bool = False


class DialogChecklist(BaseModel):
    thema: bool
    zielgruppe: bool
    rolleKi: bool
    ausgabeformat: bool
    lerneffekt: bool
    material: Optional[bool] = None

    @classmethod
    def empty(cls) -> "DialogChecklist":
        return cls(**{key: False for key in REQUIRED_CHECKLIST_KEYS})


class DialogEnvelope(BaseModel):
    """The two-field object every dialog turn answers with."""
    reply: str
    checklist: DialogChecklist
