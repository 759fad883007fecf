"""
数据模型模块
"""

from .document import ContentBlock, ContentType, Document, new_block_id
from .options import LLMOptions

__all__ = [
    "ContentBlock",
    "ContentType",
    "Document",
    "new_block_id",
    "LLMOptions",
]
