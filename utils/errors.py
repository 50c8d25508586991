"""
Exception hierarchy for provider calls.

Callers branch on the exception type (or on ``code_name`` for capability
errors) rather than on message text.
"""
from __future__ import annotations

from typing import Any


class ChatBridgeError(Exception):
    """Base class for every error raised by the provider clients."""


class StreamProtocolError(ChatBridgeError):
    """An event-stream payload could not be decoded."""

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


class ApiError(ChatBridgeError):
    """The provider reported an error, either in a payload or with a non-2xx status."""

    def __init__(self, message: str, payload: Any = None, status_code: int | None = None):
        super().__init__(message)
        self.payload = payload
        self.status_code = status_code


class ChatProviderAPIError(ChatBridgeError):
    """A known provider limitation mapped to a stable error code."""

    # code_name -> user-facing message
    KNOWN_CODES = {
        "model_not_support_image": "The selected model does not support image input. Switch to a vision-capable model.",
    }

    def __init__(self, message: str, code_name: str):
        super().__init__(message)
        self.code_name = code_name

    @classmethod
    def from_code_name(cls, code_name: str, fallback_message: str | None = None) -> "ChatProviderAPIError":
        message = cls.KNOWN_CODES.get(code_name, fallback_message or code_name)
        return cls(message, code_name)


class RequestCancelled(ChatBridgeError):
    """The caller aborted the request through its cancellation signal."""

    def __init__(self, message: str = "Request cancelled"):
        super().__init__(message)


class ContextLimitError(ValueError):
    """The prompt does not fit in the model's context window."""
