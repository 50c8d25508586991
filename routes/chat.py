"""
Route handlers for standard chat operations.
Handles the /chat endpoint (non-streaming).
"""
import httpx
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from models.api_models import ChatRequest
from services.providers import get_chat_provider
from utils.errors import ApiError, ChatProviderAPIError, ContextLimitError, RequestCancelled, StreamProtocolError
from utils.logger import app_logger
from utils.token_manager import TokenManager

router = APIRouter()


def send_context_limit_error(e) -> dict:
    """Send token usage context limit error."""
    return {
        "error": "context_limit_exceeded",
        "message": str(e),
        "suggestions": [
            "Start a new chat",
            "Try a model with a larger context window",
            "Shorten the system prompt or earlier messages"
        ]
    }


def describe_error(e: Exception) -> tuple[dict, int]:
    """
    Translate a provider call failure into an error body and HTTP status.

    Returns:
        Tuple of (error_body, status_code)
    """
    if isinstance(e, ContextLimitError):
        app_logger.error(f"Context limit error: {e}")
        return send_context_limit_error(e), status.HTTP_400_BAD_REQUEST
    if isinstance(e, ChatProviderAPIError):
        app_logger.warning(f"Capability error: {e.code_name}")
        return {"error": e.code_name, "message": str(e)}, status.HTTP_400_BAD_REQUEST
    if isinstance(e, ApiError):
        app_logger.error(f"Provider error: {e}")
        return {"error": "provider_error", "message": str(e)}, status.HTTP_502_BAD_GATEWAY
    if isinstance(e, StreamProtocolError):
        app_logger.error(f"Malformed provider stream: {e}")
        return {"error": "protocol_error", "message": str(e)}, status.HTTP_502_BAD_GATEWAY
    if isinstance(e, RequestCancelled):
        app_logger.info("Provider call cancelled")
        return {"error": "cancelled", "message": str(e)}, 499
    if isinstance(e, httpx.HTTPError):
        app_logger.error(f"Network error: {e}")
        return {"error": "network_error", "message": str(e)}, status.HTTP_502_BAD_GATEWAY
    if isinstance(e, ValueError):
        app_logger.error(f"Invalid request: {e}")
        return {"error": "invalid_request", "message": str(e)}, status.HTTP_400_BAD_REQUEST

    app_logger.error(f"Chat error: {e}")
    return {"error": "internal_error", "message": str(e)}, status.HTTP_500_INTERNAL_SERVER_ERROR


@router.post("/chat")
async def chat(request: ChatRequest):
    """
    Chat endpoint: sends the conversation to the provider and returns the final text.
    """
    try:
        provider = get_chat_provider(request.provider, request.model, request.temperature, request.top_p)
        messages = request.chat_messages()
        tokens_used, safe_limit = TokenManager.ensure_within_limit(messages, provider.model)

        response = await provider.call_chat_completion(messages)
        app_logger.info(f"{provider.name} call completed: Generated {len(response)} characters")

        return {
            "response": response,
            "provider": request.provider,
            "model": provider.model,
            "tokens": {"used": tokens_used, "limit": safe_limit}
        }

    except Exception as e:
        body, status_code = describe_error(e)
        return JSONResponse(status_code=status_code, content=body)
