"""
Models package exports.
"""
from models.api_models import Message, ChatRequest, ModelSelection
from models.chat_models import ChatMessage, ModelCapability, OpenAIOptions, DeepSeekOptions

__all__ = [
    'Message',
    'ChatRequest',
    'ModelSelection',
    'ChatMessage',
    'ModelCapability',
    'OpenAIOptions',
    'DeepSeekOptions'
]
