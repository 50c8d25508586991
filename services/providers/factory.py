"""
Factory for creating provider clients.
"""
from typing import Optional

from config import Config
from models.chat_models import DeepSeekOptions, OpenAIOptions
from services.providers.base import ChatProvider
from services.providers.deepseek_provider import DeepSeekProvider
from services.providers.openai_provider import OpenAIProvider
from utils.logger import app_logger
from utils.transport import ProviderTransport


def get_chat_provider(
    provider: str,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    top_p: Optional[float] = None,
    transport: Optional[ProviderTransport] = None,
) -> ChatProvider:
    """
    Build a provider client from configuration plus per-request overrides.

    Raises:
        ValueError: unknown provider, or an unknown DeepSeek model
    """
    provider = provider.lower()
    model = model or Config.default_model(provider)
    temperature = Config.TEMPERATURE if temperature is None else temperature
    top_p = Config.TOP_P if top_p is None else top_p

    app_logger.info(f"Initializing provider: {provider} ({model})")

    if provider == "openai":
        return OpenAIProvider(OpenAIOptions(
            api_key=Config.api_key_for(provider),
            api_host=Config.OPENAI_API_HOST,
            api_path=Config.OPENAI_API_PATH,
            model=model,
            custom_model=Config.OPENAI_CUSTOM_MODEL,
            azure_deployment=Config.AZURE_OPENAI_DEPLOYMENT,
            reasoning_effort=Config.OPENAI_REASONING_EFFORT,
            temperature=temperature,
            top_p=top_p,
        ), transport)

    if provider == "deepseek":
        return DeepSeekProvider(DeepSeekOptions(
            api_key=Config.api_key_for(provider),
            model=model,
            temperature=temperature,
            top_p=top_p,
        ), transport)

    raise ValueError(
        f"Unknown provider: {provider}. "
        f"Supported providers: {', '.join(Config.PROVIDERS)}"
    )
