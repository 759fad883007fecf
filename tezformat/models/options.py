"""
LLM 调用相关数据模型
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class LLMOptions(BaseModel):
    """LLM 调用选项"""
    max_tokens: int = Field(default=8192, description="最大 Token 数")
    temperature: float = Field(default=0.3, description="温度参数")
    top_p: float = Field(default=0.9, description="Top-P 采样")
    timeout: float = Field(default=120.0, description="超时时间（秒）")
    json_output: bool = Field(default=True, description="是否要求模型输出 JSON")
