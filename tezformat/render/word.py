"""
Word 导出器

将 Document 导出为符合 İYYÜ 论文格式的 Word (.docx) 文档
"""

from __future__ import annotations

import asyncio
import io
import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Union

from docx import Document as new_docx
from docx.enum.table import WD_ALIGN_VERTICAL, WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, Twips
from rich.console import Console

from ..errors import ExportFailure
from ..models import ContentBlock, ContentType, Document
from .rules import (
    PAGE_LAYOUT,
    Alignment,
    FormatRule,
    PageLayout,
    apply_casing,
    cm_to_twips,
    rule_for,
)

if TYPE_CHECKING:
    from docx.document import Document as DocxDocument
    from docx.table import Table as DocxTable
    from docx.text.paragraph import Paragraph as DocxParagraph
    from docx.text.run import Run

    DocxNode = Union[DocxParagraph, DocxTable]


console = Console()
logger = logging.getLogger(__name__)

# 下载时使用的固定文件名
EXPORT_FILENAME = "duzenlenmis_tez_taslagi.docx"

HEADER_FILL = "D9D9D9"

_ALIGNMENTS = {
    Alignment.LEFT: WD_ALIGN_PARAGRAPH.LEFT,
    Alignment.CENTER: WD_ALIGN_PARAGRAPH.CENTER,
    Alignment.JUSTIFY: WD_ALIGN_PARAGRAPH.JUSTIFY,
}


class WordExporter:
    """
    Word 导出器

    通过 python-docx 直接生成 Word 文档，排版规则与 HTML 预览一致
    """

    def __init__(self, layout: PageLayout = PAGE_LAYOUT):
        self.layout = layout

    def build(self, document: Document) -> "DocxDocument":
        """
        组装 Word 文档对象

        Args:
            document: 文档对象

        Returns:
            python-docx 文档对象
        """
        doc = new_docx()
        self._set_page_layout(doc)
        self._set_document_defaults(doc)

        for block in document.blocks:
            self.render_block(doc, block)

        return doc

    def render_bytes(self, document: Document) -> bytes:
        """
        将文档序列化为 .docx 字节流

        组装过程中的任何异常都转换为 ExportFailure
        """
        try:
            doc = self.build(document)
            buffer = io.BytesIO()
            doc.save(buffer)
        except Exception as e:
            logger.exception("Word 文档组装失败")
            raise ExportFailure(f"docx assembly failed: {e}") from e
        return buffer.getvalue()

    async def export_async(self, document: Document) -> bytes:
        """在线程中生成字节流，避免阻塞事件循环"""
        return await asyncio.to_thread(self.render_bytes, document)

    def export(self, document: Document, output_path: str | Path) -> Path:
        """
        导出为 Word 文件

        先写入同目录下的临时文件，成功后再替换目标文件，失败时不留下残缺文件。

        Args:
            document: 文档对象
            output_path: 输出文件路径

        Returns:
            输出文件路径
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        data = self.render_bytes(document)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.stem}-", suffix=".docx", dir=output_path.parent
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, output_path)
        except OSError as e:
            logger.exception("Word 文件保存失败: %s", output_path)
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise ExportFailure(f"could not save {output_path}: {e}") from e

        console.print(f"[green]✓ Word 文档已生成: {output_path}[/green]")
        return output_path

    def render_block(self, doc: "DocxDocument", block: ContentBlock) -> list["DocxNode"]:
        """
        渲染单个内容块

        除表格外每个块生成一个段落；表格块生成相邻的「表题段落 + 表格」两个节点，
        表格无数据时只生成表题段落。
        """
        rule = rule_for(block.type)

        if block.type is ContentType.TABLE:
            nodes: list["DocxNode"] = [self._add_caption(doc, block, rule)]
            table = self._add_table(doc, block.rows, rule)
            if table is not None:
                nodes.append(table)
            return nodes

        style = "List Bullet" if rule.bulleted else None
        paragraph = doc.add_paragraph(style=style)
        self._apply_rule(paragraph, rule)
        self._add_run(paragraph, apply_casing(block.content, rule), bold=rule.bold)
        return [paragraph]

    def _set_page_layout(self, doc: "DocxDocument") -> None:
        """设置纸张大小与页边距"""
        layout = self.layout
        for section in doc.sections:
            section.page_width = Twips(cm_to_twips(layout.width_cm))
            section.page_height = Twips(cm_to_twips(layout.height_cm))
            section.top_margin = Twips(cm_to_twips(layout.margin_top_cm))
            section.bottom_margin = Twips(cm_to_twips(layout.margin_bottom_cm))
            section.left_margin = Twips(cm_to_twips(layout.margin_left_cm))
            section.right_margin = Twips(cm_to_twips(layout.margin_right_cm))

    def _set_document_defaults(self, doc: "DocxDocument") -> None:
        """设置文档默认样式"""
        style = doc.styles["Normal"]
        style.font.name = self.layout.font_family
        style.font.size = Pt(self.layout.font_size_pt)
        style._element.rPr.rFonts.set(qn("w:eastAsia"), self.layout.font_family)
        style.paragraph_format.line_spacing = self.layout.line_spacing

    def _apply_rule(self, paragraph: "DocxParagraph", rule: FormatRule) -> None:
        """将排版规则写入段落格式"""
        fmt = paragraph.paragraph_format
        paragraph.alignment = _ALIGNMENTS[rule.alignment]
        fmt.line_spacing = rule.line_spacing
        fmt.space_before = Pt(rule.space_before_pt)
        fmt.space_after = Pt(rule.space_after_pt)
        # 缩进为 0 时不写入，保留样式自带的缩进（如项目符号的悬挂缩进）
        if rule.first_line_indent_cm:
            fmt.first_line_indent = Twips(cm_to_twips(rule.first_line_indent_cm))
        if rule.left_indent_cm:
            fmt.left_indent = Twips(cm_to_twips(rule.left_indent_cm))
        if rule.right_indent_cm:
            fmt.right_indent = Twips(cm_to_twips(rule.right_indent_cm))

    def _add_run(self, paragraph: "DocxParagraph", text: str, bold: bool = False) -> "Run":
        """添加文字，统一使用基础字体与字号"""
        run = paragraph.add_run(text)
        run.bold = bold
        run.font.name = self.layout.font_family
        run.font.size = Pt(self.layout.font_size_pt)
        run._element.rPr.rFonts.set(qn("w:eastAsia"), self.layout.font_family)
        return run

    def _add_caption(
        self,
        doc: "DocxDocument",
        block: ContentBlock,
        rule: FormatRule,
    ) -> "DocxParagraph":
        """添加表题段落（位于表格上方）"""
        caption = doc.add_paragraph()
        self._apply_rule(caption, rule)
        self._add_run(caption, apply_casing(block.content, rule), bold=rule.bold)
        return caption

    def _add_table(
        self,
        doc: "DocxDocument",
        rows: list[list[str]],
        rule: FormatRule,
    ) -> "DocxTable | None":
        """创建 Word 表格，第一行为表头"""
        if not rows:
            return None

        num_rows = len(rows)
        num_cols = max(len(row) for row in rows)
        if num_cols == 0:
            return None

        word_table = doc.add_table(rows=num_rows, cols=num_cols)
        word_table.style = "Table Grid"
        word_table.alignment = WD_TABLE_ALIGNMENT.CENTER

        for i, row in enumerate(rows):
            is_header = i == 0
            for j in range(num_cols):
                cell = word_table.cell(i, j)
                cell.vertical_alignment = WD_ALIGN_VERTICAL.CENTER
                paragraph = cell.paragraphs[0]
                paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
                paragraph.paragraph_format.line_spacing = rule.cell_line_spacing
                paragraph.paragraph_format.space_after = Pt(0)
                text = row[j] if j < len(row) else ""
                self._add_run(paragraph, text, bold=is_header and rule.header_bold)
                if is_header:
                    self._shade_cell(cell, HEADER_FILL)

        return word_table

    def _shade_cell(self, cell, fill: str) -> None:
        """设置单元格底纹"""
        tc_pr = cell._tc.get_or_add_tcPr()
        shading = OxmlElement("w:shd")
        shading.set(qn("w:val"), "clear")
        shading.set(qn("w:color"), "auto")
        shading.set(qn("w:fill"), fill)
        tc_pr.append(shading)
