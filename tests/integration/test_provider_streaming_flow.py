import asyncio
import json

import pytest

from models.chat_models import DeepSeekOptions, OpenAIOptions
from services.providers import DeepSeekProvider, OpenAIProvider
from tests.fixtures.responses import (
    IMAGE_UNSUPPORTED_ERROR_BODY,
    NON_STREAM_RESPONSE,
    content_chunk,
    reasoning_chunk,
    sse,
)
from tests.helpers import ProgressRecorder
from utils.errors import ChatProviderAPIError, RequestCancelled


@pytest.mark.anyio
async def test_deepseek_reasoner_end_to_end(chat_messages, wire_transport_builder):
    """
    Given a reasoner stream split across network chunks, the full call should
    produce the composite text and one progress update per fragment.
    """
    transport = wire_transport_builder.with_raw_chunks(
        sse(reasoning_chunk("Think")),
        "data: " + reasoning_chunk("ing")[:10],
        reasoning_chunk("ing")[10:] + "\n\n",
        ": keep-alive\n\n",
        sse(content_chunk("Answer")),
        sse("[DONE]"),
        sse(content_chunk("ignored")),
    ).build()
    provider = DeepSeekProvider(DeepSeekOptions(api_key="sk-ds", model="deepseek-reasoner"), transport, api_host="https://api.deepseek.com/")
    recorder = ProgressRecorder()

    result = await provider.call_chat_completion(chat_messages, on_progress=recorder)

    assert result == "reasoning:Thinking\n\ncontent:Answer"
    assert recorder.values == ["reasoning:Think", "reasoning:Thinking", "reasoning:Thinking\n\ncontent:Answer"]

    request = wire_transport_builder.requests[-1]
    assert str(request.url) == "https://api.deepseek.com/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-ds"
    body = wire_transport_builder.last_body
    assert body["max_tokens"] == 8192
    assert body["stream"] is True
    assert body["messages"][0]["content"].startswith("Current model: deepseek-reasoner\nCurrent date: ")


@pytest.mark.anyio
async def test_openai_stream_end_to_end(chat_messages, wire_transport_builder):
    """Given an OpenAI stream, only the answer text should be reported."""
    transport = wire_transport_builder.with_events(
        content_chunk("Hel"),
        content_chunk("lo"),
        "[DONE]",
    ).build()
    provider = OpenAIProvider(OpenAIOptions(api_key="sk-test", model="gpt-4o"), transport)
    recorder = ProgressRecorder()

    result = await provider.call_chat_completion(chat_messages, on_progress=recorder)

    assert result == "Hello"
    assert recorder.values == ["Hel", "Hello"]
    assert wire_transport_builder.requests[-1].headers["api-key"] == "sk-test"


@pytest.mark.anyio
async def test_openai_reasoning_model_end_to_end(chat_messages, wire_transport_builder):
    """Given an o-series model, the JSON body should be read once and reported once."""
    transport = wire_transport_builder.with_json(NON_STREAM_RESPONSE).build()
    provider = OpenAIProvider(OpenAIOptions(api_key="sk-test", model="o1-mini"), transport)
    recorder = ProgressRecorder()

    result = await provider.call_chat_completion(chat_messages, on_progress=recorder)

    assert result == "hello"
    assert recorder.values == ["hello"]
    roles = [m["role"] for m in wire_transport_builder.last_body["messages"]]
    assert "system" not in roles


@pytest.mark.anyio
async def test_image_unsupported_status_is_capability_error(chat_messages, wire_transport_builder):
    """Given a 400 about image_url, the call should fail with the model_not_support_image code."""
    transport = wire_transport_builder.with_status(400, json.dumps(IMAGE_UNSUPPORTED_ERROR_BODY)).build()
    provider = DeepSeekProvider(DeepSeekOptions(api_key="sk-ds"), transport)

    with pytest.raises(ChatProviderAPIError) as exc_info:
        await provider.call_chat_completion(chat_messages)

    assert exc_info.value.code_name == "model_not_support_image"


@pytest.mark.anyio
async def test_cancelling_mid_stream_stops_progress(chat_messages, wire_transport_builder):
    """
    Given a stream that stalls after one update, setting the signal should
    reject the call with RequestCancelled and no further progress.
    """
    transport = wire_transport_builder.with_events(reasoning_chunk("a")).hanging().build()
    provider = DeepSeekProvider(DeepSeekOptions(api_key="sk-ds", model="deepseek-reasoner"), transport)
    signal = asyncio.Event()
    recorder = ProgressRecorder()

    def on_progress(value):
        recorder(value)
        signal.set()

    with pytest.raises(RequestCancelled):
        await asyncio.wait_for(provider.call_chat_completion(chat_messages, signal, on_progress), timeout=5)

    assert recorder.values == ["reasoning:a"]
