"""
LLM 模块
"""

from .base import LLMProvider, LLMResponse
from .providers import (
    DeepSeekProvider,
    GeminiProvider,
    OpenAICompatibleProvider,
    create_provider,
)

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "GeminiProvider",
    "DeepSeekProvider",
    "OpenAICompatibleProvider",
    "create_provider",
]
