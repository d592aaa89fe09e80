# ============================================================
# Python client for the Eduprompt service
# ------------------------------------------------------------
#   - EdupromptClient: thin HTTP wrapper over the two routes
#   - PromptSession:   owns a ConversationStore and drives the
#                      dialog -> checklist -> synthesis flow
# ============================================================

from __future__ import annotations
import base64
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from eduprompt.conversation import ConversationStore, StructuredContext, Turn
from eduprompt.log import get_logger

logger = get_logger("eduprompt.client")


class ClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def encode_image(path: str | Path) -> str:
    """Read an image file into a data URI suitable for Turn.image."""
    path = Path(path)
    mime, _ = mimetypes.guess_type(path.name)
    if not mime or not mime.startswith("image/"):
        raise ValueError(f"Nicht unterstützter Dateityp: {path.name}")
    data = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{data}"


def extract_pdf_text(path: str | Path) -> str:
    """Plain text of a PDF file, pages separated as pdfminer lays them out."""
    from pdfminer.high_level import extract_text
    from pdfminer.pdfparser import PDFSyntaxError

    path = Path(path)
    if path.suffix.lower() != ".pdf":
        raise ValueError(f"Nicht unterstützter Dateityp: {path.name}")
    try:
        return extract_text(str(path))
    except PDFSyntaxError as e:
        raise ValueError(f"Fehler beim Verarbeiten des PDFs: {path.name}") from e


def pdf_prefix(name: str, text: str) -> str:
    """Header block that puts a PDF's text in front of the next user message."""
    return f'INHALT AUS PDF "{name}":\n\n{text.strip()}\n\n---\n\n'


class EdupromptClient:
    def __init__(self, base_url: str = "http://localhost:8000", http=None):
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()

    def _post(self, path: str, body: Dict[str, Any], fallback_error: str) -> Dict[str, Any]:
        try:
            resp = self.http.post(f"{self.base_url}{path}", json=body)
        except requests.RequestException as e:
            logger.error("POST %s failed: %s", path, e)
            raise ClientError("Serverfehler.") from e
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        if resp.status_code >= 400 or "error" in data:
            raise ClientError(data.get("error") or fallback_error, resp.status_code)
        return data

    def dialog_turn(self, turns: List[Turn]) -> Dict[str, Any]:
        data = self._post(
            "/dialog-turn",
            {"messages": [t.to_payload() for t in turns]},
            "Fehler bei der Antwort der Input-KI.",
        )
        if not data.get("reply"):
            raise ClientError("Fehler bei der Antwort der Input-KI.")
        return data

    def generate_instruction(self, turns: List[Turn]) -> str:
        data = self._post(
            "/generate-instruction",
            {"chat": [t.to_payload() for t in turns]},
            "Fehler bei der Generierung.",
        )
        return data.get("result") or ""


class PromptSession:
    """One teacher's dialog. Failed calls keep prior state and set .error."""

    def __init__(self, client: EdupromptClient, context: Optional[StructuredContext] = None):
        self.client = client
        self.store = ConversationStore()
        if context is not None:
            self.store.set_context(context)
        self.result = ""
        self.error: Optional[str] = None

    def send_message(self, text: str, image: Optional[str] = None) -> Optional[str]:
        """Send a user turn; returns the assistant reply or None on failure."""
        turns = self.store.submit_user_turn(text, image)
        if not turns:
            return None
        self.error = None
        try:
            data = self.client.dialog_turn(turns)
        except ClientError as e:
            self.error = e.message
            return None
        reply = data["reply"]
        self.store.append_turn(Turn(role="assistant", content=reply))
        if isinstance(data.get("checklist"), dict):
            self.store.merge_checklist(data["checklist"])
        return reply

    def generate_instruction(self) -> str:
        """Run instruction synthesis; an empty result counts as a failure."""
        self.result = ""
        self.error = None
        try:
            result = self.client.generate_instruction(self.store.generation_payload())
        except ClientError as e:
            self.error = e.message
            return ""
        if not result:
            self.error = "Fehler bei der Generierung."
            return ""
        self.result = result
        return result

    def edit_result(self, text: str) -> None:
        self.result = text

    def reset(self) -> None:
        self.store.reset()
        self.result = ""
        self.error = None
