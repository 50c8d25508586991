"""
OpenAI-compatible chat completion client.
Also serves Azure OpenAI and OpenRouter through host/path normalization.
"""
import asyncio
import json
from dataclasses import replace
from typing import Optional, Sequence

from config import Config
from models.chat_models import ChatMessage, OpenAIOptions
from services.message_preprocessor import MessagePreprocessor
from services.providers.base import bearer_headers, drop_unset, normalize_capability_error
from services.stream_service import ContentAccumulator, ProgressCallback, StreamService
from utils.errors import ApiError, StreamProtocolError
from utils.logger import app_logger
from utils.model_catalog import OPENAI_MODEL_CONFIGS
from utils.transport import ProviderTransport

DEFAULT_API_HOST = "https://api.openai.com"
DEFAULT_API_PATH = "/v1/chat/completions"
OPENROUTER_V1_HOST = "https://openrouter.ai/api/v1"
OPENROUTER_HOST = "https://openrouter.ai/api"
AZURE_API_VERSION = "2024-02-15-preview"
CUSTOM_MODEL = "custom-model"
VISION_PREVIEW_MODEL = "gpt-4-vision-preview"


class OpenAIProvider:
    """Chat client for the OpenAI chat completions API and compatible gateways."""

    name = "OpenAI"

    def __init__(self, options: OpenAIOptions, transport: ProviderTransport | None = None):
        self.options = self.normalize_options(options)
        self.transport = transport or ProviderTransport()

    @staticmethod
    def normalize_options(options: OpenAIOptions) -> OpenAIOptions:
        """Fix up host and path once, at construction time."""
        host = options.api_host.strip().rstrip("/") or DEFAULT_API_HOST
        path = options.api_path.strip()

        if host.startswith(OPENROUTER_V1_HOST):
            host = OPENROUTER_HOST
        if path and not path.startswith("/"):
            path = "/" + path
        if ".openai.azure.com" in host:
            if options.azure_deployment:
                path = f"/openai/deployments/{options.azure_deployment}/chat/completions?api-version={AZURE_API_VERSION}"
            else:
                path = ""

        return replace(options, api_host=host, api_path=path)

    @property
    def model(self) -> str:
        """Model id sent on the wire."""
        if self.options.model == CUSTOM_MODEL:
            return self.options.custom_model
        return self.options.model

    @property
    def url(self) -> str:
        return f"{self.options.api_host}{self.options.api_path or DEFAULT_API_PATH}"

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
        messages = MessagePreprocessor.inject_metadata(model, messages)

        # o1-mini and o1-preview reject reasoning_effort
        if model.startswith("o1-mini") or model.startswith("o1-preview"):
            app_logger.info(f"{model}: non-streaming request without system role")
            wire = MessagePreprocessor.to_wire(MessagePreprocessor.remap_for_reasoning_models(messages))
            return await self.request_chat_completions_not_stream({
                "model": model,
                "messages": wire,
            }, signal, on_progress)

        if model.startswith("o"):
            app_logger.info(f"{model}: non-streaming request, reasoning_effort={self.options.reasoning_effort}")
            wire = MessagePreprocessor.to_wire(MessagePreprocessor.remap_for_reasoning_models(messages))
            return await self.request_chat_completions_not_stream({
                "model": model,
                "messages": wire,
                "reasoning_effort": self.options.reasoning_effort,
            }, signal, on_progress)

        # The vision preview defaults to a tiny max_tokens, so ask for the model maximum
        max_tokens = None
        if self.options.model == VISION_PREVIEW_MODEL:
            max_tokens = OPENAI_MODEL_CONFIGS[VISION_PREVIEW_MODEL].max_output_tokens

        app_logger.info(f"{model}: streaming request")
        return await self.request_chat_completions_stream(drop_unset({
            "messages": MessagePreprocessor.to_wire(messages),
            "model": model,
            "max_tokens": max_tokens,
            "temperature": self.options.temperature,
            "top_p": self.options.top_p,
            "stream": True,
        }), signal, on_progress)

    async def request_chat_completions_stream(
        self,
        body: dict,
        signal: Optional[asyncio.Event] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        response = await self.transport.post(self.url, await self.get_headers(), body, signal)
        return await StreamService.aggregate_stream(
            self.transport.iter_events(response, signal),
            ContentAccumulator(),
            on_progress=on_progress,
            signal=signal,
            provider_name=self.name
        )

    async def request_chat_completions_not_stream(
        self,
        body: dict,
        signal: Optional[asyncio.Event] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        """Single request for models that reject streaming. Progress fires once with the full text."""
        response = await self.transport.post(self.url, await self.get_headers(), body, signal)
        data = await self.transport.read_json(response, signal)
        if not isinstance(data, dict):
            raise StreamProtocolError("Response body is not a JSON object", raw=str(data))
        if data.get("error"):
            raise ApiError(f"Error from {self.name}: {json.dumps(data)}", payload=data)

        choices = data.get("choices")
        first = choices[0] if isinstance(choices, list) and choices else None
        message = first.get("message") if isinstance(first, dict) else None
        if not isinstance(message, dict):
            raise StreamProtocolError("Response has no choices[0].message", raw=json.dumps(data))

        content = message.get("content") or ""
        if on_progress:
            on_progress(content)
        return content

    async def get_headers(self) -> dict[str, str]:
        headers = await bearer_headers(self.transport, self.options.api_key)
        headers["api-key"] = headers["Authorization"].removeprefix("Bearer ")
        if "openrouter.ai" in self.options.api_host:
            headers["HTTP-Referer"] = Config.APP_REFERER
            headers["X-Title"] = Config.APP_TITLE
        return headers
