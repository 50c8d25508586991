"""
Token management utilities for context window handling.
Provides token estimation and context limit validation against the model catalog.
"""
from typing import Sequence

from config import Config
from models.chat_models import ChatMessage
from utils.errors import ContextLimitError
from utils.logger import app_logger
from utils.model_catalog import get_capability


class TokenManager:
    """Manages token counting and context limit validation."""

    DEFAULT_CONTEXT_LIMIT = 8192

    # Safety buffer context limit percentage
    SAFETY_BUFFER = Config.SAFETY_BUFFER

    @staticmethod
    def get_model_context_limit(model_name: str) -> int:
        """Get model's maximum context window from the catalog."""
        capability = get_capability(model_name)
        if capability is None:
            app_logger.warning(f"Model {model_name} not in catalog, using default {TokenManager.DEFAULT_CONTEXT_LIMIT}")
            return TokenManager.DEFAULT_CONTEXT_LIMIT
        return capability.max_context_tokens

    @staticmethod
    def estimate_tokens(text: str) -> int:
        """Estimate token count for text using character-based approximation."""
        if not text:
            return 0

        char_estimate = len(text) // 4
        word_estimate = len(text.split())

        return int((char_estimate * 0.6) + (word_estimate * 0.4))

    @staticmethod
    def calculate_messages_tokens(messages: Sequence[ChatMessage]) -> int:
        """Calculate total tokens for a list of messages, with per-message overhead."""
        return sum(TokenManager.estimate_tokens(m.content) + 4 for m in messages)

    @staticmethod
    def check_context_limit(
        messages: Sequence[ChatMessage],
        model_name: str
    ) -> tuple[bool, int, int, int]:
        """
        Check if messages fit within model's context limit with safety buffer.

        Returns:
            Tuple of (within_limit, tokens_used, safe_limit, model_max)
        """
        model_max = TokenManager.get_model_context_limit(model_name)
        safe_limit = int(model_max * TokenManager.SAFETY_BUFFER)
        tokens_used = TokenManager.calculate_messages_tokens(messages)
        within_limit = tokens_used <= safe_limit

        app_logger.debug(
            f"Token check: {tokens_used}/{safe_limit} tokens "
            f"(model max: {model_max}, safety: {int(TokenManager.SAFETY_BUFFER * 100)}%)"
        )

        return within_limit, tokens_used, safe_limit, model_max

    @staticmethod
    def ensure_within_limit(messages: Sequence[ChatMessage], model_name: str) -> tuple[int, int]:
        """
        Raise ContextLimitError when the conversation is too large for the model.

        Returns:
            Tuple of (tokens_used, safe_limit)
        """
        within_limit, tokens_used, safe_limit, model_max = TokenManager.check_context_limit(messages, model_name)
        if not within_limit:
            raise ContextLimitError(
                f"Conversation uses about {tokens_used:,} tokens but {model_name} accepts {safe_limit:,} "
                f"({model_max:,} context window)"
            )
        return tokens_used, safe_limit
