"""
排版规则表

İYYÜ 论文格式（基于 APA 7）：每种内容块类型对应一组固定的物理排版属性。
HTML 预览与 Word 导出都从这里取值，保证两边的排版决策一致。
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..models import ContentType


BASE_FONT_FAMILY = "Times New Roman"
BASE_FONT_SIZE_PT = 12.0

# Word 使用 twip（1/20 磅）作为长度单位
TWIPS_PER_CM = 567
TWIPS_PER_LINE = 240


class Alignment(str, Enum):
    """段落对齐方式"""
    LEFT = "left"
    CENTER = "center"
    JUSTIFY = "justify"


class FormatRule(BaseModel):
    """单一内容块类型的排版规则"""
    model_config = ConfigDict(frozen=True)

    font_family: str = Field(default=BASE_FONT_FAMILY, description="字体")
    font_size_pt: float = Field(default=BASE_FONT_SIZE_PT, description="字号（磅）")
    alignment: Alignment = Field(default=Alignment.JUSTIFY, description="对齐方式")
    line_spacing: float = Field(default=1.5, description="行距倍数")
    first_line_indent_cm: float = Field(default=0.0, description="首行缩进（厘米）")
    left_indent_cm: float = Field(default=0.0, description="左缩进（厘米）")
    right_indent_cm: float = Field(default=0.0, description="右缩进（厘米）")
    space_before_pt: float = Field(default=0.0, description="段前间距（磅）")
    space_after_pt: float = Field(default=0.0, description="段后间距（磅）")
    bold: bool = Field(default=False, description="是否加粗")
    uppercase: bool = Field(default=False, description="是否转为大写")
    bulleted: bool = Field(default=False, description="是否为项目符号列表")
    # 以下仅对表格有效
    cell_line_spacing: float = Field(default=1.0, description="单元格行距倍数")
    header_bold: bool = Field(default=False, description="表头是否加粗")


class PageLayout(BaseModel):
    """页面设置（A4）"""
    model_config = ConfigDict(frozen=True)

    width_cm: float = 21.0
    height_cm: float = 29.7
    margin_top_cm: float = 3.0
    margin_bottom_cm: float = 3.0
    margin_left_cm: float = 4.0
    margin_right_cm: float = 2.5
    font_family: str = BASE_FONT_FAMILY
    font_size_pt: float = BASE_FONT_SIZE_PT
    line_spacing: float = 1.5


PAGE_LAYOUT = PageLayout()


RULES: dict[ContentType, FormatRule] = {
    ContentType.TITLE: FormatRule(
        alignment=Alignment.CENTER,
        space_after_pt=12,
        bold=True,
        uppercase=True,
    ),
    ContentType.HEADING: FormatRule(
        alignment=Alignment.LEFT,
        space_before_pt=12,
        space_after_pt=6,
        bold=True,
    ),
    ContentType.PARAGRAPH: FormatRule(
        alignment=Alignment.JUSTIFY,
        first_line_indent_cm=1.25,
        space_after_pt=6,
    ),
    ContentType.BLOCK_QUOTE: FormatRule(
        alignment=Alignment.JUSTIFY,
        line_spacing=2.0,
        left_indent_cm=0.5,
        right_indent_cm=0.5,
        space_after_pt=12,
    ),
    ContentType.LIST_ITEM: FormatRule(
        alignment=Alignment.JUSTIFY,
        bulleted=True,
    ),
    # 表格规则作用于表题段落与表格本身
    ContentType.TABLE: FormatRule(
        alignment=Alignment.LEFT,
        space_before_pt=12,
        space_after_pt=6,
        bold=True,
        cell_line_spacing=1.0,
        header_bold=True,
    ),
}

# 未识别的类型一律按正文段落处理
DEFAULT_RULE = RULES[ContentType.PARAGRAPH]


def rule_for(block_type: ContentType | str | None) -> FormatRule:
    """
    获取内容块类型对应的排版规则

    对封闭集合中的每个类型都有定义；无法识别的输入返回正文段落规则。
    """
    if isinstance(block_type, ContentType):
        return RULES[block_type]
    if isinstance(block_type, str):
        try:
            return RULES[ContentType(block_type.upper())]
        except ValueError:
            return DEFAULT_RULE
    return DEFAULT_RULE


def cm_to_twips(cm: float) -> int:
    """厘米转 twip（1cm ≈ 567 twip）"""
    return round(cm * TWIPS_PER_CM)


def line_spacing_twips(multiplier: float) -> int:
    """行距倍数转 twip（单倍 = 240）"""
    return round(multiplier * TWIPS_PER_LINE)


def apply_casing(text: str, rule: FormatRule) -> str:
    """按规则转换大小写"""
    return text.upper() if rule.uppercase else text
