from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from eduprompt.errors import ConfigurationError, EdupromptError
from eduprompt.log import get_logger
from eduprompt.settings import Settings, settings

logger = get_logger("eduprompt.app")


def check_configuration(cfg: Settings) -> None:
    """Raise ConfigurationError when the selected engine cannot be used."""
    if cfg.USE_ECHO or cfg.USE_OLLAMA:
        return
    if not cfg.OPENAI_API_KEY:
        raise ConfigurationError("OpenAI API key not set.")


def build_model_client(cfg: Settings):
    check_configuration(cfg)
    if cfg.USE_ECHO:
        from eduprompt.generate.clients.echo_dev_client import EchoDevClient
        return EchoDevClient()
    if cfg.USE_OLLAMA:
        from eduprompt.generate.clients.ollama_client import OllamaClient
        return OllamaClient(model=cfg.OLLAMA_MODEL, host=cfg.OLLAMA_HOST)
    from eduprompt.generate.clients.openai_client import OpenAIClient
    return OpenAIClient(model=cfg.OPENAI_MODEL, api_key=cfg.OPENAI_API_KEY)


def get_model_client():
    """FastAPI dependency: a fresh model client per request."""
    return build_model_client(settings)


def _error_response(exc: EdupromptError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(EdupromptError)
    async def handle_eduprompt_error(
        request: Request,
        exc: EdupromptError,
    ) -> JSONResponse:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        # a missing credential wins over a bad body
        try:
            check_configuration(settings)
        except ConfigurationError as config_error:
            return _error_response(config_error)

        first_error = exc.errors()[0]["msg"] if exc.errors() else "Invalid request"
        return JSONResponse(status_code=400, content={"error": first_error})
