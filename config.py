"""
Configuration module for the Chat Provider Bridge application.
Handles environment variables and provider defaults.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration class."""

    # Bridge access
    API_KEY: str = os.getenv("API_KEY", "")

    # OpenAI-compatible provider
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_API_HOST: str = os.getenv("OPENAI_API_HOST", "https://api.openai.com")
    OPENAI_API_PATH: str = os.getenv("OPENAI_API_PATH", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OPENAI_CUSTOM_MODEL: str = os.getenv("OPENAI_CUSTOM_MODEL", "")
    AZURE_OPENAI_DEPLOYMENT: str = os.getenv("AZURE_OPENAI_DEPLOYMENT", "")
    OPENAI_REASONING_EFFORT: str = os.getenv("OPENAI_REASONING_EFFORT", "medium")

    # DeepSeek provider
    DEEPSEEK_API_KEY: str = os.getenv("DEEPSEEK_API_KEY", "")
    DEEPSEEK_API_HOST: str = os.getenv("DEEPSEEK_API_HOST", "https://api.deepseek.com")
    DEEPSEEK_MODEL: str = os.getenv("DEEPSEEK_MODEL", "deepseek-chat")

    # Fallback bearer token used when a provider key is not configured
    ACCESS_TOKEN: str = os.getenv("ACCESS_TOKEN", "")

    # Sampling defaults
    TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))
    TOP_P: float = float(os.getenv("TOP_P", "1.0"))

    # Application Settings
    APP_TITLE: str = "Chat Provider Bridge"
    APP_REFERER: str = os.getenv("APP_REFERER", "http://localhost:8000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Timeouts (in seconds)
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "120"))
    CONNECT_TIMEOUT: float = 10.0

    # Connection pool
    MAX_CONNECTIONS: int = 20

    # Fraction of the context window a prompt may use
    SAFETY_BUFFER: float = float(os.getenv("SAFETY_BUFFER", "0.9"))

    PROVIDERS = ("openai", "deepseek")

    @classmethod
    def default_model(cls, provider: str) -> str:
        """Get the configured default model for a provider."""
        if provider == "deepseek":
            return cls.DEEPSEEK_MODEL
        return cls.OPENAI_MODEL

    @classmethod
    def api_key_for(cls, provider: str) -> str:
        """Get the configured API key for a provider."""
        if provider == "deepseek":
            return cls.DEEPSEEK_API_KEY
        return cls.OPENAI_API_KEY

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and print warnings for missing API keys."""
        if not cls.OPENAI_API_KEY and not cls.ACCESS_TOKEN:
            print("   WARNING: OPENAI_API_KEY not found in .env file")
            print("   OpenAI requests will be sent without credentials unless ACCESS_TOKEN is set.")

        if not cls.DEEPSEEK_API_KEY and not cls.ACCESS_TOKEN:
            print("   WARNING: DEEPSEEK_API_KEY not found in .env file")
            print("   DeepSeek requests will fail. Get your key from: https://platform.deepseek.com/api_keys")

        if not 0 < cls.SAFETY_BUFFER <= 1:
            print(f"   WARNING: SAFETY_BUFFER={cls.SAFETY_BUFFER} is outside (0, 1], context checks may misbehave")


Config.validate()
