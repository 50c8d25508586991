"""
Pydantic data models for API requests and responses.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, model_validator

from models.chat_models import ChatMessage


class Message(BaseModel):
    """Chat message model."""
    role: Literal["system", "user", "assistant"]
    content: str
    name: Optional[str] = None

    def to_chat_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content, name=self.name)


class ChatRequest(BaseModel):
    """Chat request model with the full conversation."""
    provider: Literal["openai", "deepseek"] = "openai"
    model: Optional[str] = Field(None, description="Model id, defaults to the provider's configured model")
    messages: List[Message] = Field(..., min_length=1)
    temperature: Optional[float] = Field(None, ge=0, le=2)
    top_p: Optional[float] = Field(None, ge=0, le=1)

    @model_validator(mode="after")
    def check_deepseek_model(self):
        from utils.model_catalog import DEEPSEEK_MODEL_CONFIGS

        if self.provider == "deepseek" and self.model and self.model not in DEEPSEEK_MODEL_CONFIGS:
            raise ValueError(f"Unknown DeepSeek model: {self.model}")
        return self

    def chat_messages(self) -> list[ChatMessage]:
        return [m.to_chat_message() for m in self.messages]


class ModelSelection(BaseModel):
    """Model chosen in the selection control."""
    model: str
