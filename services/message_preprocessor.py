"""
Message preprocessing applied before a provider request.
Injects model/date metadata into the system prompt and remaps roles for
model families that reject the system role.
"""
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, Optional

from models.chat_models import ChatMessage


class MessagePreprocessor:
    """Pure transformations over chat message lists. Inputs are never mutated."""

    METADATA_TEMPLATE = "Current model: {model}\nCurrent date: {date}\n\n"

    @staticmethod
    def format_timestamp(now: Optional[datetime] = None) -> str:
        """ISO-8601 UTC timestamp with millisecond precision, e.g. 2025-01-31T08:15:00.000Z."""
        now = now or datetime.now(timezone.utc)
        return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @staticmethod
    def _has_metadata(message: ChatMessage, model_id: str) -> bool:
        return message.content.startswith(f"Current model: {model_id}\nCurrent date: ")

    @staticmethod
    def inject_metadata(model_id: str, messages: Iterable[ChatMessage], now: Optional[datetime] = None) -> list[ChatMessage]:
        """
        Prefix the first system message with the current model and date.

        Only the first system message is touched, and only if it does not
        already carry the header for this model. Every other message is
        copied through unchanged.

        Args:
            model_id: Model identifier sent on the wire
            messages: Conversation in order
            now: Timestamp override, mainly for tests

        Returns:
            New list of messages
        """
        prefix = MessagePreprocessor.METADATA_TEMPLATE.format(
            model=model_id,
            date=MessagePreprocessor.format_timestamp(now)
        )

        injected = False
        result = []
        for message in messages:
            if message.role == "system" and not injected:
                injected = True
                if not MessagePreprocessor._has_metadata(message, model_id):
                    message = replace(message, content=prefix + message.content)
            result.append(replace(message))
        return result

    @staticmethod
    def remap_for_reasoning_models(messages: Iterable[ChatMessage]) -> list[ChatMessage]:
        """Rewrite system messages as user messages, keeping order, count and content."""
        return [
            replace(m, role="user") if m.role == "system" else replace(m)
            for m in messages
        ]

    @staticmethod
    def to_wire(messages: Iterable[ChatMessage]) -> list[dict]:
        """Convert messages to the request body shape: [{role, content[, name]}]."""
        wire = []
        for m in messages:
            item = {"role": m.role, "content": m.content}
            if m.name:
                item["name"] = m.name
            wire.append(item)
        return wire
