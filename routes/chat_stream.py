"""
Route handlers for streaming chat operations.
Handles the /chat/stream endpoint, relaying provider progress as SSE.
"""
import asyncio
from typing import AsyncIterator

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from models.api_models import ChatRequest
from routes.chat import describe_error
from services.providers import get_chat_provider
from services.stream_service import StreamService
from utils.logger import app_logger
from utils.token_manager import TokenManager

router = APIRouter()


@router.post("/chat/stream")
async def chat_stream(request: ChatRequest):
    """
    Streaming chat endpoint.

    Emits `status` events, one `progress` event per provider update carrying
    the accumulated text, then `done` or `error`.
    """

    async def event_generator() -> AsyncIterator[str]:
        signal = asyncio.Event()
        progress: asyncio.Queue[str] = asyncio.Queue()
        task = None
        getter = None
        try:
            yield StreamService.send_sse_event("status", {"stage": "initializing"})

            provider = get_chat_provider(request.provider, request.model, request.temperature, request.top_p)
            messages = request.chat_messages()
            TokenManager.ensure_within_limit(messages, provider.model)

            yield StreamService.send_sse_event("status", {"stage": "generating", "model": provider.model})

            task = asyncio.create_task(
                provider.call_chat_completion(messages, signal, progress.put_nowait)
            )

            while True:
                getter = asyncio.ensure_future(progress.get())
                await asyncio.wait({task, getter}, return_when=asyncio.FIRST_COMPLETED)
                if getter.done():
                    yield StreamService.send_sse_event("progress", {"content": getter.result()})
                    continue
                getter.cancel()
                break

            while not progress.empty():
                yield StreamService.send_sse_event("progress", {"content": progress.get_nowait()})

            result = await task
            app_logger.info(f"{provider.name} stream completed: Generated {len(result)} characters")
            yield StreamService.send_sse_event("done", {
                "full_response": result,
                "provider": request.provider,
                "model": provider.model
            })

        except Exception as e:
            body, _ = describe_error(e)
            yield StreamService.send_sse_event("error", body)

        finally:
            if getter is not None and not getter.done():
                getter.cancel()
            if task is not None and not task.done():
                app_logger.info("Client disconnected, cancelling provider call")
                signal.set()
                task.cancel()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no"
        }
    )
