"""
Prompt 模板模块
"""

from .templates import (
    RESPONSE_SCHEMA,
    STRUCTURING_SYSTEM_PROMPT,
    STRUCTURING_USER_PROMPT,
    build_structuring_prompt,
)

__all__ = [
    "RESPONSE_SCHEMA",
    "STRUCTURING_SYSTEM_PROMPT",
    "STRUCTURING_USER_PROMPT",
    "build_structuring_prompt",
]
