"""
Streaming service containing core streaming logic.
Folds provider event streams into accumulated text and formats SSE output.
"""
import asyncio
import json
from contextlib import aclosing
from dataclasses import dataclass, replace
from typing import AsyncIterator, Callable, Iterable, Optional

from utils.errors import ApiError, StreamProtocolError
from utils.logger import app_logger
from utils.transport import ProviderTransport, raise_if_cancelled

ProgressCallback = Callable[[str], None]


@dataclass(frozen=True)
class ContentAccumulator:
    """Single-channel accumulator: progress reports the raw running text."""
    content: str = ""
    result: str = ""

    @staticmethod
    def fragments(data: dict) -> Iterable[dict]:
        """Only the first choice carries the answer."""
        choices = data.get("choices") or []
        if choices and isinstance(choices[0], dict):
            yield choices[0].get("delta") or {}

    def apply(self, delta: dict) -> "ContentAccumulator":
        text = delta.get("content")
        if not text:
            return self
        content = self.content + text
        return replace(self, content=content, result=content)


@dataclass(frozen=True)
class ReasoningAccumulator:
    """
    Two-channel accumulator for providers that stream reasoning separately.

    Composite result: "reasoning:<reasoning>", followed by
    "\\n\\ncontent:<content>" once any content has arrived.
    """
    reasoning: str = ""
    content: str = ""
    result: str = ""

    @staticmethod
    def fragments(data: dict) -> Iterable[dict]:
        """Every choice, in array order."""
        choices = data.get("choices")
        if not isinstance(choices, list):
            return
        for choice in choices:
            if isinstance(choice, dict) and choice.get("delta"):
                yield choice["delta"]

    @staticmethod
    def compose(reasoning: str, content: str) -> str:
        result = "reasoning:" + reasoning
        if content:
            result += "\n\ncontent:" + content
        return result

    def apply(self, delta: dict) -> "ReasoningAccumulator":
        reasoning = self.reasoning + (delta.get("reasoning_content") or "")
        content = self.content + (delta.get("content") or "")
        if reasoning == self.reasoning and content == self.content:
            return self
        return ReasoningAccumulator(reasoning, content, self.compose(reasoning, content))


class StreamService:
    """Service for handling streaming provider responses."""

    @staticmethod
    def send_sse_event(event_type: str, data: dict) -> str:
        """Format data as Server-Sent Events (SSE) format."""
        return f"event: {event_type}\ndata: {json.dumps(data, separators=(',', ':'))}\n\n"

    @staticmethod
    def parse_event(message: str) -> dict:
        """Decode one event payload. A malformed payload is fatal for the call."""
        try:
            data = json.loads(message)
        except ValueError as e:
            raise StreamProtocolError(f"Malformed stream event: {e}", raw=message) from e
        if not isinstance(data, dict):
            raise StreamProtocolError("Stream event is not a JSON object", raw=message)
        return data

    @staticmethod
    async def aggregate_stream(
        events: AsyncIterator[str],
        accumulator=None,
        on_progress: Optional[ProgressCallback] = None,
        signal: Optional[asyncio.Event] = None,
        provider_name: str = "OpenAI"
    ) -> str:
        """
        Fold an event stream into its final text.

        Events are processed strictly in arrival order. After every fragment
        that changes the accumulated text, `on_progress` receives the
        accumulator's current result.

        Args:
            events: Decoded SSE payloads from the transport
            accumulator: Initial fold state, ContentAccumulator by default
            on_progress: Optional progress callback
            signal: Cancellation signal checked before each event
            provider_name: Used in error messages

        Returns:
            The last accumulated result, or "" if nothing arrived

        Raises:
            StreamProtocolError: an event was not valid JSON
            ApiError: an event carried an error field
            RequestCancelled: the signal was set mid-stream
        """
        state = accumulator if accumulator is not None else ContentAccumulator()
        event_count = 0

        async with aclosing(events) as stream:
            async for message in stream:
                raise_if_cancelled(signal)
                if message == ProviderTransport.STREAM_END:
                    break

                event_count += 1
                data = StreamService.parse_event(message)
                if data.get("error"):
                    app_logger.error(f"{provider_name} stream reported an error after {event_count} events")
                    raise ApiError(f"Error from {provider_name}: {json.dumps(data)}", payload=data)

                for delta in state.fragments(data):
                    # a callback may set the signal between choices of one event
                    raise_if_cancelled(signal)
                    updated = state.apply(delta)
                    if updated is state:
                        continue
                    state = updated
                    if on_progress:
                        on_progress(state.result)

        app_logger.debug(f"{provider_name} stream finished after {event_count} events, {len(state.result)} chars")
        return state.result
