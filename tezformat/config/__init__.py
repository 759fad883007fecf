"""
配置模块
"""

from .settings import (
    LLMConfig,
    AppConfig,
    load_config,
    create_structuring_provider,
    create_structurer,
    load_document,
    save_document,
)

__all__ = [
    "LLMConfig",
    "AppConfig",
    "load_config",
    "create_structuring_provider",
    "create_structurer",
    "load_document",
    "save_document",
]
