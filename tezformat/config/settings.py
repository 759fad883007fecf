"""
配置管理模块
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ..llm import LLMProvider, create_provider
from ..models import ContentBlock, Document, LLMOptions
from ..pipeline import DocumentStructurer, parse_blocks


class LLMConfig(BaseModel):
    """LLM 配置"""
    api_key: str
    base_url: str | None = None
    model: str
    provider_type: str = "gemini"


class AppConfig(BaseModel):
    """应用配置"""
    structuring_llm: LLMConfig = Field(..., description="结构化模型配置")
    max_tokens: int = Field(default=8192, description="最大 Token 数")
    temperature: float = Field(default=0.3, description="温度参数")
    timeout: float = Field(default=120.0, description="超时时间（秒）")
    log_level: str = Field(default="WARNING", description="日志级别")

    def llm_options(self) -> LLMOptions:
        return LLMOptions(
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            timeout=self.timeout,
        )


def load_config(env_file: str | Path | None = None) -> AppConfig:
    """
    从环境变量加载配置

    API Key 为空时不报错，调用模型时才会以 StructuringFailure 失败

    Args:
        env_file: .env 文件路径，默认为当前目录的 .env

    Returns:
        AppConfig 实例
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    api_key = (
        os.getenv("TEZFORMAT_API_KEY")
        or os.getenv("API_KEY")
        or os.getenv("GEMINI_API_KEY", "")
    )

    structuring_llm = LLMConfig(
        api_key=api_key,
        base_url=os.getenv("TEZFORMAT_BASE_URL") or None,
        model=os.getenv("TEZFORMAT_MODEL", "gemini-2.5-flash"),
        provider_type=os.getenv("TEZFORMAT_PROVIDER", "gemini"),
    )

    return AppConfig(
        structuring_llm=structuring_llm,
        max_tokens=int(os.getenv("TEZFORMAT_LLM_MAX_TOKENS", "8192")),
        temperature=float(os.getenv("TEZFORMAT_LLM_TEMPERATURE", "0.3")),
        timeout=float(os.getenv("TEZFORMAT_LLM_TIMEOUT", "120")),
        log_level=os.getenv("TEZFORMAT_LOG_LEVEL", "WARNING"),
    )


def create_structuring_provider(config: AppConfig) -> LLMProvider:
    """创建结构化模型 Provider"""
    return create_provider(
        provider_type=config.structuring_llm.provider_type,
        api_key=config.structuring_llm.api_key,
        base_url=config.structuring_llm.base_url,
        model=config.structuring_llm.model,
    )


def create_structurer(config: AppConfig) -> DocumentStructurer:
    """创建文档结构化器"""
    return DocumentStructurer(
        provider=create_structuring_provider(config),
        options=config.llm_options(),
    )


def load_document(file_path: str | Path) -> Document:
    """
    从 YAML 文件加载文档

    内容块 ID 在加载时重新生成

    Args:
        file_path: YAML 文件路径

    Returns:
        Document 实例
    """
    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    # 与模型输出走同一套校验逻辑
    return parse_blocks(data.get("blocks") or [])


def save_document(document: Document, file_path: str | Path) -> None:
    """
    将文档保存到 YAML 文件

    Args:
        document: Document 实例
        file_path: 输出文件路径
    """
    def block_to_dict(b: ContentBlock) -> dict[str, Any]:
        d: dict[str, Any] = {
            "type": b.type.value,
            "content": b.content,
        }
        if b.is_table:
            d["tableRows"] = [list(row) for row in b.rows]
        return d

    data = {"blocks": [block_to_dict(b) for b in document.blocks]}

    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, allow_unicode=True, default_flow_style=False, sort_keys=False)
