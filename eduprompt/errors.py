# Error taxonomy shared by the services and the HTTP layer.
# Every EdupromptError is rendered as {"error": message} with its status code.

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass
class EdupromptError(Exception):
    message: str
    status_code: int = 500

    def __str__(self) -> str:
        return self.message


@dataclass
class ConfigurationError(EdupromptError):
    """Upstream credential or engine setup is missing. Fatal to the request."""
    status_code: int = 500


@dataclass
class InvalidConversationError(EdupromptError):
    """Empty or malformed turn list. The caller must fix and resubmit."""
    status_code: int = 400


@dataclass
class UpstreamError(EdupromptError):
    """The language-model API answered with an error or could not be reached.

    upstream_status is None for transport failures.
    """
    status_code: int = 500
    upstream_status: Optional[int] = None
    upstream_message: Optional[str] = None


class MalformedPayloadError(ValueError):
    """Model output that does not match the dialog envelope. Recovered locally."""

    def __init__(self, raw: str, reason: str):
        super().__init__(reason)
        self.raw = raw
        self.reason = reason
