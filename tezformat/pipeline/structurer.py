"""
文本结构化

调用外部 LLM 将原始文本拆分为带类型的内容块，并在边界处完成校验与类型收敛
"""

from __future__ import annotations

import json
import logging
import re
import time
from typing import Any

import httpx
from rich.console import Console

from ..errors import StructuringFailure
from ..llm import LLMProvider
from ..models import ContentBlock, ContentType, Document, LLMOptions
from ..prompts import RESPONSE_SCHEMA, STRUCTURING_SYSTEM_PROMPT, build_structuring_prompt


console = Console()
logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


def _coerce_type(value: Any) -> ContentType:
    """未知类型一律视为正文段落"""
    if isinstance(value, str):
        try:
            return ContentType(value.strip().upper())
        except ValueError:
            pass
    return ContentType.PARAGRAPH


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _coerce_rows(value: Any) -> list[list[str]]:
    """只接受二维数组，其他形式按空表处理"""
    if not isinstance(value, list):
        return []
    rows: list[list[str]] = []
    for row in value:
        if not isinstance(row, list):
            continue
        rows.append([_coerce_text(cell) for cell in row])
    return rows


def parse_blocks(payload: Any) -> Document:
    """
    将模型返回的 JSON 转换为 Document

    - 顶层必须是数组，否则视为结构化失败
    - 非对象元素被丢弃
    - 模型给出的 id 被忽略，总是分配新的 id

    Args:
        payload: json.loads 之后的数据

    Returns:
        Document 实例
    """
    if not isinstance(payload, list):
        raise StructuringFailure(
            f"expected a JSON array, got {type(payload).__name__}"
        )

    blocks: list[ContentBlock] = []
    for item in payload:
        if not isinstance(item, dict):
            logger.warning("忽略非对象内容块: %r", item)
            continue
        block_type = _coerce_type(item.get("type"))
        table_rows = None
        if block_type is ContentType.TABLE:
            table_rows = _coerce_rows(item.get("tableRows"))
        blocks.append(ContentBlock(
            type=block_type,
            content=_coerce_text(item.get("content")),
            table_rows=table_rows,
        ))

    return Document(blocks=tuple(blocks))


def extract_json(content: str) -> Any:
    """从模型输出中提取 JSON（先整体解析，失败时再兼容 ```json 代码块）"""
    try:
        return json.loads(content.strip())
    except json.JSONDecodeError as e:
        json_match = _FENCED_JSON.search(content)
        if json_match is None:
            logger.error("JSON 解析失败: %s; 原始响应: %s", e, content[:1000])
            raise StructuringFailure(f"model returned invalid JSON: {e}") from e

    try:
        return json.loads(json_match.group(1))
    except json.JSONDecodeError as e:
        logger.error("JSON 解析失败: %s; 原始响应: %s", e, content[:1000])
        raise StructuringFailure(f"model returned invalid JSON: {e}") from e


class DocumentStructurer:
    """
    文档结构化器

    使用固定的指令与输出结构调用 LLM，成功时返回 Document，
    其余情况（缺少配置、网络错误、返回格式错误）统一抛出 StructuringFailure
    """

    def __init__(
        self,
        provider: LLMProvider,
        options: LLMOptions | None = None,
    ):
        self.provider = provider
        self.options = options or LLMOptions()

    async def structure(self, raw_text: str) -> Document:
        """
        将原始文本结构化为 Document

        Args:
            raw_text: 用户输入的原始文本

        Returns:
            Document 实例
        """
        if not self.provider.api_key:
            logger.error("未配置 API Key: %r", self.provider)
            raise StructuringFailure("API key not found in environment variables")

        start_time = time.time()
        try:
            response = await self.provider.invoke(
                prompt=build_structuring_prompt(raw_text),
                system_prompt=STRUCTURING_SYSTEM_PROMPT,
                response_schema=RESPONSE_SCHEMA,
                options=self.options,
            )
        except httpx.HTTPStatusError as e:
            logger.error(
                "LLM 返回 HTTP %s: %s", e.response.status_code, e.response.text[:500]
            )
            raise StructuringFailure(f"LLM returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("LLM 请求失败: %s", e)
            raise StructuringFailure(f"LLM request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.exception("LLM 响应结构异常")
            raise StructuringFailure(f"unexpected LLM response: {e}") from e

        content = response.content or ""
        if not content.strip():
            # 空响应按空数组处理
            document = Document()
        else:
            document = parse_blocks(extract_json(content))

        elapsed = time.time() - start_time
        console.print(
            f"[green]✓ 结构化完成，共 {len(document.blocks)} 个内容块 ({elapsed:.1f}秒)[/green]"
        )
        logger.debug("LLM usage: %s", response.usage)
        return document
