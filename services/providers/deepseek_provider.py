"""
DeepSeek chat completion client.
Streams both the reasoning channel and the answer channel.
"""
import asyncio
from typing import Optional, Sequence

from config import Config
from models.chat_models import ChatMessage, DeepSeekOptions
from services.message_preprocessor import MessagePreprocessor
from services.providers.base import bearer_headers, normalize_capability_error
from services.stream_service import ProgressCallback, ReasoningAccumulator, StreamService
from utils.errors import ApiError
from utils.logger import app_logger
from utils.model_catalog import DEEPSEEK_MODEL_CONFIGS
from utils.transport import ProviderTransport

API_PATH = "/v1/chat/completions"


class DeepSeekProvider:
    """Chat client for the DeepSeek API."""

    name = "DeepSeek"

    def __init__(self, options: DeepSeekOptions, transport: ProviderTransport | None = None, api_host: str | None = None):
        if options.model not in DEEPSEEK_MODEL_CONFIGS:
            raise ValueError(f"Unknown DeepSeek model: {options.model}")
        self.options = options
        self.transport = transport or ProviderTransport()
        self.api_host = (api_host or Config.DEEPSEEK_API_HOST).rstrip("/")

    @property
    def model(self) -> str:
        return self.options.model

    async def call_chat_completion(
        self,
        messages: Sequence[ChatMessage],
        signal: Optional[asyncio.Event] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        try:
            return await self._call_chat_completion(messages, signal, on_progress)
        except ApiError as e:
            normalized = normalize_capability_error(e)
            if normalized is e:
                raise
            raise normalized from e

    async def _call_chat_completion(
        self,
        messages: Sequence[ChatMessage],
        signal: Optional[asyncio.Event],
        on_progress: Optional[ProgressCallback],
    ) -> str:
        model = self.model
        app_logger.info(f"{model}: streaming request with {len(messages)} messages")

        messages = MessagePreprocessor.inject_metadata(model, messages)
        return await self.request_chat_completions_stream({
            "messages": MessagePreprocessor.to_wire(messages),
            "model": model,
            "max_tokens": DEEPSEEK_MODEL_CONFIGS[model].max_output_tokens,
            "temperature": self.options.temperature,
            "top_p": self.options.top_p,
            "stream": True,
        }, signal, on_progress)

    async def request_chat_completions_stream(
        self,
        body: dict,
        signal: Optional[asyncio.Event] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        response = await self.transport.post(
            f"{self.api_host}{API_PATH}",
            await bearer_headers(self.transport, self.options.api_key),
            body,
            signal
        )
        return await StreamService.aggregate_stream(
            self.transport.iter_events(response, signal),
            ReasoningAccumulator(),
            on_progress=on_progress,
            signal=signal,
            provider_name=self.name
        )
