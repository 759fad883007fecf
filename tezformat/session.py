"""
格式化会话

持有当前唯一的 Document，负责「格式化」与「导出」两个动作：
- 同一时间最多只有一个格式化请求在执行，新的请求直接被拒绝
- 失败时不提交任何部分状态，原 Document 保持不变
- 成功时整体替换 Document
"""

from __future__ import annotations

import logging

from .errors import (
    ExportFailure,
    FormatInProgressError,
    InputValidationError,
    StructuringFailure,
    TezFormatError,
)
from .models import Document
from .pipeline import DocumentStructurer
from .render import PreviewRenderer, WordExporter


logger = logging.getLogger(__name__)


class FormatSession:
    """单用户格式化会话"""

    def __init__(
        self,
        structurer: DocumentStructurer,
        exporter: WordExporter | None = None,
        preview_renderer: PreviewRenderer | None = None,
    ):
        self.structurer = structurer
        self.exporter = exporter or WordExporter()
        self.preview_renderer = preview_renderer or PreviewRenderer()
        self.document = Document()
        self.error: str | None = None
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        """是否有格式化请求正在执行"""
        return self._in_flight

    def can_format(self, raw_text: str) -> bool:
        """「格式化」按钮是否可用"""
        return bool(raw_text.strip()) and not self._in_flight

    @property
    def can_export(self) -> bool:
        """「导出」按钮是否可用"""
        return not self.document.is_empty

    def preview(self, standalone: bool = False) -> str:
        """渲染当前文档的 HTML 预览"""
        return self.preview_renderer.render(self.document, standalone=standalone)

    def _fail(self, error: TezFormatError) -> None:
        self.error = error.user_message
        logger.error("%s: %s", type(error).__name__, error.detail)

    async def format_text(self, raw_text: str) -> Document:
        """
        结构化原始文本并替换当前文档

        Args:
            raw_text: 原始文本

        Returns:
            新的 Document

        Raises:
            InputValidationError: 输入为空
            FormatInProgressError: 已有请求在执行
            StructuringFailure: 结构化失败（原文档保持不变）
        """
        if not raw_text.strip():
            error = InputValidationError("empty input rejected")
            self._fail(error)
            raise error
        if self._in_flight:
            raise FormatInProgressError("a format request is already running")

        self._in_flight = True
        try:
            document = await self.structurer.structure(raw_text)
        except StructuringFailure as e:
            self._fail(e)
            raise
        except Exception as e:
            failure = StructuringFailure(f"unexpected structuring error: {e}")
            logger.exception("结构化过程中出现未预期的错误")
            self.error = failure.user_message
            raise failure from e
        finally:
            self._in_flight = False

        self.document = document
        self.error = None
        return document

    async def export_docx(self) -> bytes:
        """
        导出当前文档为 .docx 字节流

        Raises:
            ExportFailure: 文档为空或组装失败（文档保持不变）
        """
        document = self.document
        if document.is_empty:
            error = ExportFailure("nothing to export: document is empty")
            self._fail(error)
            raise error
        try:
            data = await self.exporter.export_async(document)
        except ExportFailure as e:
            self._fail(e)
            raise
        self.error = None
        return data
