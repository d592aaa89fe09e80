#!/usr/bin/env python3
# =============================================================
# cli.py
# -------------------------------------------------------------
# Commands:
#   eduprompt serve [--host 0.0.0.0] [--port 8000] [--reload]
#       Run the FastAPI app with uvicorn.
#
#   eduprompt chat [--url http://localhost:8000]
#                  [--grade ..] [--subject ..] [--goal ..] [--duration ..]
#       Interactive dialog in the terminal. Plain lines are sent as
#       user turns; slash commands:
#         /image <path>  attach an image to the next turn
#         /pdf <path>    put the text of a PDF in front of the next turn
#         /checklist     show the checklist
#         /generate      build the final instruction (needs 4 checked items)
#         /reset         start over
#         /quit          leave
# =============================================================

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional

from eduprompt.client import EdupromptClient, PromptSession, encode_image, extract_pdf_text, pdf_prefix
from eduprompt.conversation import GENERATION_THRESHOLD, StructuredContext

CHECKLIST_LABELS = {
    "thema": "Thema / Aufgabe",
    "zielgruppe": "Zielgruppe (Klasse)",
    "rolleKi": "Rolle der KI",
    "ausgabeformat": "Ausgabeformat",
    "lerneffekt": "Gewünschter Lerneffekt",
    "material": "Unterrichtsmaterialien",
}


def render_checklist(checklist: dict) -> str:
    lines = []
    for key, label in CHECKLIST_LABELS.items():
        mark = "x" if checklist.get(key) else " "
        lines.append(f"  [{mark}] {label}")
    return "\n".join(lines)


class ChatShell:
    """Line-oriented front end over a PromptSession."""

    def __init__(self, session: PromptSession, out: Callable[[str], None] = print):
        self.session = session
        self.out = out
        self.pending_image: Optional[str] = None
        self.pending_text = ""

    def handle(self, line: str) -> bool:
        """Process one input line. Returns False when the shell should stop."""
        line = line.strip()
        if not line:
            return True
        if line in ("/quit", "/exit"):
            return False
        if line == "/checklist":
            self.out(render_checklist(self.session.store.checklist))
        elif line == "/reset":
            self.session.reset()
            self.pending_image = None
            self.pending_text = ""
            self.out(self.session.store.turns[0].content)
        elif line.startswith("/image"):
            self._attach(line[len("/image"):].strip())
        elif line.startswith("/pdf"):
            self._attach_pdf(line[len("/pdf"):].strip())
        elif line == "/generate":
            self._generate()
        else:
            self._send(line)
        return True

    def _attach(self, path: str) -> None:
        if not path:
            self.out("Bitte einen Dateipfad angeben: /image <pfad>")
            return
        try:
            self.pending_image = encode_image(path)
        except (OSError, ValueError) as e:
            self.out(f"Fehler: {e}")
            return
        self.out(f"Bild angehängt: {path}")

    def _attach_pdf(self, path: str) -> None:
        if not path:
            self.out("Bitte einen Dateipfad angeben: /pdf <pfad>")
            return
        try:
            text = extract_pdf_text(path)
        except (OSError, ValueError) as e:
            self.out(f"Fehler: {e}")
            return
        self.pending_text = pdf_prefix(Path(path).name, text) + self.pending_text
        self.out(f"PDF angehängt: {path}")

    def _send(self, text: str) -> None:
        image, self.pending_image = self.pending_image, None
        text, self.pending_text = self.pending_text + text, ""
        # the turn is in the history now, even if the request fails
        reply = self.session.send_message(text, image)
        if reply is None:
            self.out(f"Fehler: {self.session.error}")
            return
        self.out(f"KI: {reply}")
        self.out(render_checklist(self.session.store.checklist))

    def _generate(self) -> None:
        store = self.session.store
        if not store.generation_enabled:
            self.out(
                f"Schliesse zuerst mindestens {GENERATION_THRESHOLD} Punkte der Checkliste ab "
                f"({store.checked_count}/{GENERATION_THRESHOLD})."
            )
            return
        result = self.session.generate_instruction()
        if not result:
            self.out(f"Fehler: {self.session.error}")
            return
        self.out("\n--- Instruktion ---\n" + result + "\n-------------------")


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("eduprompt.app:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def _chat(args: argparse.Namespace) -> int:
    context = StructuredContext(
        grade_level=args.grade or "",
        subject=args.subject or "",
        learning_goal=args.goal or "",
        duration=args.duration or "",
    )
    session = PromptSession(EdupromptClient(args.url), context=context)
    shell = ChatShell(session)
    print(session.store.turns[0].content)
    while True:
        try:
            line = input("> ")
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        if not shell.handle(line):
            return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="eduprompt", description="Guided dialog for classroom AI instructions.")
    sub = ap.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP service.")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=_serve)

    chat = sub.add_parser("chat", help="Interactive dialog against a running service.")
    chat.add_argument("--url", default="http://localhost:8000")
    chat.add_argument("--grade", help="Klassenstufe")
    chat.add_argument("--subject", help="Fach")
    chat.add_argument("--goal", help="Lernziel")
    chat.add_argument("--duration", help="Dauer der Aktivität")
    chat.set_defaults(func=_chat)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
