"""
HTML 预览渲染器

将 Document 渲染为浏览器中的 A4 页面预览（只读、无副作用）
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..models import ContentBlock, ContentType, Document
from .rules import PAGE_LAYOUT, Alignment, FormatRule, PageLayout, apply_casing, rule_for


EMPTY_PLACEHOLDER = "Önizleme burada görünecek..."

PreviewNode = dict[str, Any]


# 默认 HTML 模板
DEFAULT_PREVIEW_TEMPLATE = """
{%- if standalone -%}
<!DOCTYPE html>
<html lang="tr">
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
</head>
<body style="margin:0;background:#f3f4f6;display:flex;justify-content:center;padding:2rem 0;">
{% endif -%}
<div class="tez-page" style="{{ page_style }}">
{%- if not nodes %}
  <div class="tez-empty" style="color:#9ca3af;font-style:italic;text-align:center;margin-top:5rem;font-family:sans-serif;">{{ placeholder }}</div>
{%- endif %}
{%- for node in nodes %}
{%- if node.kind == "title" %}
  <h1 class="tez-title" data-block="{{ node.block_id }}" style="{{ node.style }}">{{ node.text }}</h1>
{%- elif node.kind == "heading" %}
  <h2 class="tez-heading" data-block="{{ node.block_id }}" style="{{ node.style }}">{{ node.text }}</h2>
{%- elif node.kind == "quote" %}
  <blockquote class="tez-quote" data-block="{{ node.block_id }}" style="{{ node.style }}">{{ node.text }}</blockquote>
{%- elif node.kind == "list_item" %}
  <ul class="tez-list" data-block="{{ node.block_id }}" style="margin:0;padding-left:0.63cm;list-style:disc;"><li style="{{ node.style }}">{{ node.text }}</li></ul>
{%- elif node.kind == "caption" %}
  <div class="tez-caption" data-block="{{ node.block_id }}" style="{{ node.style }}">{{ node.text }}</div>
{%- elif node.kind == "grid" %}
  <table class="tez-table" data-block="{{ node.block_id }}" style="{{ node.style }}">
    <tbody>
    {%- for row in node.rows %}
      <tr>
      {%- for cell in row.cells %}
      {%- if row.header %}
        <th style="{{ node.header_cell_style }}">{{ cell }}</th>
      {%- else %}
        <td style="{{ node.cell_style }}">{{ cell }}</td>
      {%- endif %}
      {%- endfor %}
      </tr>
    {%- endfor %}
    </tbody>
  </table>
{%- else %}
  <p class="tez-paragraph" data-block="{{ node.block_id }}" style="{{ node.style }}">{{ node.text }}</p>
{%- endif %}
{%- endfor %}
</div>
{%- if standalone %}
</body>
</html>
{%- endif %}
"""


_NODE_KINDS = {
    ContentType.TITLE: "title",
    ContentType.HEADING: "heading",
    ContentType.PARAGRAPH: "paragraph",
    ContentType.BLOCK_QUOTE: "quote",
    ContentType.LIST_ITEM: "list_item",
}


def _fmt(value: float) -> str:
    """数值格式化，去掉多余的小数位"""
    return f"{value:g}"


def rule_css(rule: FormatRule) -> str:
    """将排版规则转换为内联 CSS"""
    declarations = [
        f"font-family:'{rule.font_family}',Times,serif",
        f"font-size:{_fmt(rule.font_size_pt)}pt",
        f"text-align:{rule.alignment.value}",
        f"line-height:{_fmt(rule.line_spacing)}",
        f"font-weight:{'bold' if rule.bold else 'normal'}",
        f"margin:{_fmt(rule.space_before_pt)}pt 0 {_fmt(rule.space_after_pt)}pt 0",
    ]
    if rule.first_line_indent_cm:
        declarations.append(f"text-indent:{_fmt(rule.first_line_indent_cm)}cm")
    if rule.left_indent_cm or rule.right_indent_cm:
        declarations.append(f"padding-left:{_fmt(rule.left_indent_cm)}cm")
        declarations.append(f"padding-right:{_fmt(rule.right_indent_cm)}cm")
    return ";".join(declarations) + ";"


def page_css(layout: PageLayout = PAGE_LAYOUT) -> str:
    """A4 页面容器样式（内边距即页边距）"""
    return ";".join([
        f"width:{_fmt(layout.width_cm * 10)}mm",
        f"min-height:{_fmt(layout.height_cm * 10)}mm",
        "box-sizing:border-box",
        f"padding:{_fmt(layout.margin_top_cm * 10)}mm {_fmt(layout.margin_right_cm * 10)}mm "
        f"{_fmt(layout.margin_bottom_cm * 10)}mm {_fmt(layout.margin_left_cm * 10)}mm",
        f"font-family:'{layout.font_family}',Times,serif",
        f"font-size:{_fmt(layout.font_size_pt)}pt",
        f"line-height:{_fmt(layout.line_spacing)}",
        "background:white",
        "color:black",
        "box-shadow:0 4px 6px -1px rgba(0,0,0,0.1)",
    ]) + ";"


class PreviewRenderer:
    """
    HTML 预览渲染器

    将 Document 渲染为 HTML，版式与 Word 导出共用同一套排版规则
    """

    def __init__(
        self,
        template_path: str | Path | None = None,
        template_string: str | None = None,
        layout: PageLayout = PAGE_LAYOUT,
    ):
        """
        初始化渲染器

        Args:
            template_path: 自定义模板文件路径
            template_string: 自定义模板字符串
            layout: 页面设置
        """
        self.layout = layout
        if template_path:
            template_dir = Path(template_path).parent
            template_name = Path(template_path).name
            self.env = Environment(
                loader=FileSystemLoader(str(template_dir)),
                autoescape=select_autoescape(default=True),
            )
            self.template = self.env.get_template(template_name)
        else:
            self.env = Environment(autoescape=True)
            self.template = self.env.from_string(template_string or DEFAULT_PREVIEW_TEMPLATE)

    def render_block(self, block: ContentBlock) -> list[PreviewNode]:
        """
        渲染单个内容块

        表格块展开为「表题 + 表格」两个节点（表题为空时保留空表题）；表格无数据时只生成表题。
        """
        rule = rule_for(block.type)

        if block.type is not ContentType.TABLE:
            return [{
                "kind": _NODE_KINDS.get(block.type, "paragraph"),
                "block_id": block.id,
                "text": apply_casing(block.content, rule),
                "style": rule_css(rule),
            }]

        nodes: list[PreviewNode] = [{
            "kind": "caption",
            "block_id": block.id,
            "text": block.content,
            "style": rule_css(rule),
        }]

        rows = block.rows
        if any(rows):
            cell_base = (
                f"border:1px solid black;padding:2px 6px;vertical-align:middle;"
                f"text-align:{Alignment.LEFT.value};line-height:{_fmt(rule.cell_line_spacing)};"
            )
            nodes.append({
                "kind": "grid",
                "block_id": block.id,
                "rows": [
                    {"header": index == 0, "cells": list(row)}
                    for index, row in enumerate(rows)
                ],
                "style": "width:100%;border-collapse:collapse;margin-bottom:12pt;",
                "cell_style": cell_base + "font-weight:normal;",
                "header_cell_style": cell_base
                + f"font-weight:{'bold' if rule.header_bold else 'normal'};background:#d9d9d9;",
            })
        return nodes

    def render_nodes(self, document: Document) -> list[PreviewNode]:
        """按原顺序展开所有内容块"""
        nodes: list[PreviewNode] = []
        for block in document.blocks:
            nodes.extend(self.render_block(block))
        return nodes

    def render(
        self,
        document: Document,
        standalone: bool = False,
        title: str = "Tez Önizleme",
    ) -> str:
        """
        渲染文档为 HTML

        Args:
            document: 文档对象
            standalone: 是否输出完整 HTML 页面（否则只输出页面片段）
            title: 页面标题（仅 standalone 时使用）

        Returns:
            HTML 字符串
        """
        return self.template.render(
            nodes=self.render_nodes(document),
            page_style=page_css(self.layout),
            placeholder=EMPTY_PLACEHOLDER,
            standalone=standalone,
            title=title,
        )

    def render_to_file(
        self,
        document: Document,
        output_path: str | Path,
    ) -> Path:
        """渲染完整 HTML 页面并保存到文件"""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        html = self.render(document, standalone=True)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(html)

        return output_path
