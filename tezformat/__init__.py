"""
tezformat: 论文格式化工具
将原始文本结构化为符合 İYYÜ / APA 7 格式的论文，提供 HTML 预览与 Word 导出
"""

__version__ = "0.1.0"

from .models import ContentBlock, ContentType, Document, LLMOptions
from .llm import LLMProvider, LLMResponse, create_provider
from .config import load_config, load_document, save_document, AppConfig
from .errors import (
    TezFormatError,
    InputValidationError,
    FormatInProgressError,
    StructuringFailure,
    ExportFailure,
)
from .pipeline import DocumentStructurer
from .render import EXPORT_FILENAME, FormatRule, PreviewRenderer, WordExporter, rule_for
from .session import FormatSession

__all__ = [
    # 版本
    "__version__",
    # 模型
    "ContentBlock",
    "ContentType",
    "Document",
    "LLMOptions",
    # LLM
    "LLMProvider",
    "LLMResponse",
    "create_provider",
    # 配置
    "load_config",
    "load_document",
    "save_document",
    "AppConfig",
    # 错误
    "TezFormatError",
    "InputValidationError",
    "FormatInProgressError",
    "StructuringFailure",
    "ExportFailure",
    # 结构化
    "DocumentStructurer",
    "FormatSession",
    # 渲染
    "EXPORT_FILENAME",
    "FormatRule",
    "PreviewRenderer",
    "WordExporter",
    "rule_for",
]
