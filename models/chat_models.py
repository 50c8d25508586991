"""
Data models for provider calls.
Contains chat messages, model capabilities and per-client request options.
"""
from dataclasses import dataclass
from typing import Literal, Optional

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    """A single message of a conversation. Order in the list is conversation order."""
    role: Role
    content: str
    name: Optional[str] = None


@dataclass(frozen=True)
class ModelCapability:
    """Static token limits of one model."""
    model_id: str
    max_output_tokens: int
    max_context_tokens: int


@dataclass(frozen=True)
class OpenAIOptions:
    """
    Options for the OpenAI-compatible client.

    `model` may be the literal "custom-model", in which case `custom_model`
    names the model sent on the wire.
    """
    api_key: str = ""
    api_host: str = "https://api.openai.com"
    api_path: str = ""
    model: str = "gpt-4o-mini"
    custom_model: str = ""
    azure_deployment: str = ""
    reasoning_effort: str = "medium"
    temperature: float = 0.7
    top_p: float = 1.0


@dataclass(frozen=True)
class DeepSeekOptions:
    """Options for the DeepSeek client."""
    api_key: str = ""
    model: str = "deepseek-chat"
    temperature: float = 0.7
    top_p: float = 1.0
