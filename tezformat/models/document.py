"""
数据模型定义：ContentBlock, Document
"""

from __future__ import annotations

import uuid
from collections import Counter
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ContentType(str, Enum):
    """内容块类型（封闭集合）"""
    TITLE = "TITLE"              # 论文主标题
    HEADING = "HEADING"          # 章节标题
    PARAGRAPH = "PARAGRAPH"      # 正文段落
    LIST_ITEM = "LIST_ITEM"      # 列表项
    BLOCK_QUOTE = "BLOCK_QUOTE"  # 长引文（40 词以上）
    TABLE = "TABLE"              # 表格（content 为表题）


def new_block_id() -> str:
    """生成新的内容块 ID"""
    return f"block-{uuid.uuid4().hex}"


class ContentBlock(BaseModel):
    """内容块：文档结构的最小单元"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_block_id, description="唯一标识，仅用于区分内容块")
    type: ContentType = Field(..., description="内容块类型")
    content: str = Field(default="", description="文本内容；表格时为表题")
    table_rows: list[list[str]] | None = Field(
        default=None,
        description="表格数据（仅 TABLE 类型），第一行为表头",
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize_table_rows(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        block_type = data.get("type")
        if block_type in (ContentType.TABLE, ContentType.TABLE.value):
            if data.get("table_rows") is None:
                data["table_rows"] = []
        else:
            # 非表格块不携带表格数据
            data["table_rows"] = None
        return data

    @property
    def is_table(self) -> bool:
        return self.type is ContentType.TABLE

    @property
    def rows(self) -> list[list[str]]:
        """表格行（非表格块返回空列表）"""
        if not self.is_table:
            return []
        return self.table_rows or []


class Document(BaseModel):
    """文档：有序、扁平的内容块序列"""
    model_config = ConfigDict(frozen=True)

    blocks: tuple[ContentBlock, ...] = Field(default_factory=tuple, description="按阅读顺序排列的内容块")

    @property
    def is_empty(self) -> bool:
        return len(self.blocks) == 0

    def count_by_type(self) -> dict[ContentType, int]:
        """按类型统计内容块数量"""
        counts = Counter(block.type for block in self.blocks)
        return {t: counts.get(t, 0) for t in ContentType}

    def to_payload(self) -> list[dict[str, Any]]:
        """转换为与模型输出格式一致的 JSON 结构"""
        payload: list[dict[str, Any]] = []
        for block in self.blocks:
            item: dict[str, Any] = {
                "id": block.id,
                "type": block.type.value,
                "content": block.content,
            }
            if block.is_table:
                item["tableRows"] = [list(row) for row in block.rows]
            payload.append(item)
        return payload
