"""
Provider clients exports.
"""
from services.providers.base import ChatProvider
from services.providers.deepseek_provider import DeepSeekProvider
from services.providers.factory import get_chat_provider
from services.providers.openai_provider import OpenAIProvider

__all__ = [
    'ChatProvider',
    'DeepSeekProvider',
    'OpenAIProvider',
    'get_chat_provider'
]
