"""
渲染模块

负责排版规则、HTML 预览和 Word 导出
"""

from .preview import PreviewRenderer
from .rules import DEFAULT_RULE, PAGE_LAYOUT, Alignment, FormatRule, PageLayout, rule_for
from .word import EXPORT_FILENAME, WordExporter

__all__ = [
    "Alignment",
    "DEFAULT_RULE",
    "EXPORT_FILENAME",
    "FormatRule",
    "PAGE_LAYOUT",
    "PageLayout",
    "PreviewRenderer",
    "WordExporter",
    "rule_for",
]
