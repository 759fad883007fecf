"""
Pipeline 模块
"""

from .structurer import DocumentStructurer, extract_json, parse_blocks

__all__ = [
    "DocumentStructurer",
    "extract_json",
    "parse_blocks",
]
