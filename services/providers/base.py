"""
Provider interface and the helpers every provider client composes.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Protocol, Sequence

from models.chat_models import ChatMessage
from services.stream_service import ProgressCallback
from utils.errors import ApiError, ChatProviderAPIError
from utils.logger import app_logger
from utils.transport import ProviderTransport

IMAGE_UNSUPPORTED_MARKER = "Invalid content type. image_url is only supported by certain models."


class ChatProvider(Protocol):
    name: str

    @property
    def model(self) -> str:
        """Model id sent on the wire."""
        ...

    async def call_chat_completion(
        self,
        messages: Sequence[ChatMessage],
        signal: Optional[asyncio.Event] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        """Send the conversation and return the final answer text."""
        ...


def normalize_capability_error(error: ApiError) -> Exception:
    """Map a known provider limitation to its stable error, or return the error unchanged."""
    if IMAGE_UNSUPPORTED_MARKER in str(error):
        app_logger.warning("Provider rejected image content for the selected model")
        return ChatProviderAPIError.from_code_name("model_not_support_image")
    return error


async def bearer_headers(transport: ProviderTransport, api_key: str) -> dict[str, str]:
    """Authorization headers, falling back to the transport's access token when no key is set."""
    token = api_key or await transport.get_access_token()
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }


def drop_unset(body: dict) -> dict:
    """Remove None values so unset options are not sent."""
    return {key: value for key, value in body.items() if value is not None}
