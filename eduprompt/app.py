# ============================================================
# Eduprompt FastAPI App
# ------------------------------------------------------------
# Two stateless handlers over a language model:
#   - POST /dialog-turn           next clarifying question + checklist
#   - POST /generate-instruction  final instruction text
# Every request carries the full history; nothing is stored here.
# ============================================================

from typing import List, Literal, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

# --- Local imports ---
from eduprompt import __version__
from eduprompt.dependencies import get_model_client, register_exception_handlers
from eduprompt.errors import EdupromptError
from eduprompt.generate import DialogGenerator, InstructionGenerator, Message
from eduprompt.log import get_logger
from eduprompt.settings import settings

logger = get_logger("eduprompt.app")

# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
app = FastAPI(title="Eduprompt API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# ------------------------------------------------------------
# 📦 Pydantic models
# ------------------------------------------------------------
class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str = ""
    imageBase64: Optional[str] = Field(default=None, description="Inline image as a data URI")

    def to_message(self) -> Message:
        return Message(role=self.role, content=self.content, image=self.imageBase64 or None)


class DialogTurnRequest(BaseModel):
    messages: Optional[List[ChatTurn]] = None


class GenerateInstructionRequest(BaseModel):
    chat: Optional[List[ChatTurn]] = None


class GenerateInstructionResponse(BaseModel):
    result: str

# ------------------------------------------------------------
# 💬 Dialog route
# ------------------------------------------------------------
@app.post("/dialog-turn")
def dialog_turn(req: DialogTurnRequest, model_client=Depends(get_model_client)):
    history = [t.to_message() for t in (req.messages or [])]
    try:
        envelope = DialogGenerator(model_client=model_client).turn(history)
    except EdupromptError:
        raise
    except Exception as e:
        logger.exception("Error in /dialog-turn: %s", e)
        raise EdupromptError("Ein interner Serverfehler ist aufgetreten.")
    return envelope.model_dump(exclude_none=True)

# ------------------------------------------------------------
# 🧾 Instruction synthesis route
# ------------------------------------------------------------
@app.post("/generate-instruction", response_model=GenerateInstructionResponse)
def generate_instruction(req: GenerateInstructionRequest, model_client=Depends(get_model_client)):
    history = [t.to_message() for t in (req.chat or [])]
    try:
        result = InstructionGenerator(model_client=model_client).generate(history)
    except EdupromptError:
        raise
    except Exception as e:
        logger.exception("Error in /generate-instruction: %s", e)
        raise EdupromptError("Server error.")
    return GenerateInstructionResponse(result=result)

# ------------------------------------------------------------
# 🧭 Health checks
# ------------------------------------------------------------
@app.get("/healthz")
def healthz():
    engine = "echo" if settings.USE_ECHO else "ollama" if settings.USE_OLLAMA else "openai"
    return {
        "ok": True,
        "env": settings.ENV,
        "debug": settings.DEBUG,
        "engine": engine,
        "app": settings.app_name,
    }


@app.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}


@app.get("/")
def hello():
    return {"message": "Eduprompt service running."}
