"""
Static model capability tables.
Token limits per model id, plus sorted listings for presentation.
"""
from typing import Dict, Optional

from models.chat_models import ModelCapability


def _table(limits: Dict[str, tuple[int, int]]) -> Dict[str, ModelCapability]:
    return {
        model_id: ModelCapability(model_id, max_output, max_context)
        for model_id, (max_output, max_context) in limits.items()
    }


# Ref: https://platform.openai.com/docs/models
# model id -> (max output tokens, max context tokens)
OPENAI_MODEL_CONFIGS: Dict[str, ModelCapability] = _table({
    'DeepSeek-R1': (8192, 128_000),
    'gpt-3.5-turbo': (4096, 16_385),
    'gpt-3.5-turbo-16k': (4096, 16_385),
    'gpt-3.5-turbo-1106': (4096, 16_385),
    'gpt-3.5-turbo-0125': (4096, 16_385),
    'gpt-3.5-turbo-0613': (4096, 4_096),
    'gpt-3.5-turbo-16k-0613': (4096, 16_385),

    'gpt-4o-mini': (4_096, 128_000),
    'gpt-4o-mini-2024-07-18': (4_096, 128_000),

    'gpt-4o': (4_096, 128_000),
    'gpt-4o-2024-05-13': (4_096, 128_000),
    'gpt-4o-2024-08-06': (16_384, 128_000),
    'gpt-4o-2024-11-20': (16_384, 128_000),
    'chatgpt-4o-latest': (16_384, 128_000),

    'o1': (100_000, 200_000),
    'o1-2024-12-17': (100_000, 200_000),
    'o1-preview': (32_768, 128_000),
    'o1-preview-2024-09-12': (32_768, 128_000),
    'o1-mini': (65_536, 128_000),
    'o1-mini-2024-09-12': (65_536, 128_000),

    'o3-mini': (100_000, 200_000),
    'o3-mini-2025-01-31': (100_000, 200_000),

    'gpt-4': (4_096, 8_192),
    'gpt-4-turbo': (4_096, 128_000),
    'gpt-4-turbo-2024-04-09': (4_096, 128_000),
    'gpt-4-0613': (4_096, 8_192),
    'gpt-4-32k': (4_096, 32_768),
    'gpt-4-32k-0613': (4_096, 32_768),
    'gpt-4-1106-preview': (4_096, 128_000),
    'gpt-4-0125-preview': (4_096, 128_000),
    'gpt-4-turbo-preview': (4_096, 128_000),
    'gpt-4-vision-preview': (4_096, 128_000),

    # continuous model upgrades
    'gpt-3.5-turbo-0301': (4096, 4096),
    'gpt-4-0314': (4096, 8192),
    'gpt-4-32k-0314': (4096, 32768),
})

# Ref: https://api-docs.deepseek.com/quick_start/pricing
DEEPSEEK_MODEL_CONFIGS: Dict[str, ModelCapability] = _table({
    'deepseek-chat': (8192, 65536),
    'deepseek-reasoner': (8192, 65536),
})

openai_models: list[str] = sorted(OPENAI_MODEL_CONFIGS)
deepseek_models: list[str] = sorted(DEEPSEEK_MODEL_CONFIGS)


def get_capability(model_id: str) -> Optional[ModelCapability]:
    """Look up a model in every catalog. Returns None for unknown ids."""
    return OPENAI_MODEL_CONFIGS.get(model_id) or DEEPSEEK_MODEL_CONFIGS.get(model_id)


def models_for(provider: str) -> list[str]:
    """Sorted model ids known for a provider."""
    if provider == "deepseek":
        return deepseek_models
    return openai_models
