"""
测试公共夹具：替身 Provider 与示例文档
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

from tezformat.llm import LLMProvider, LLMResponse
from tezformat.models import ContentBlock, ContentType, Document, LLMOptions


SCENARIO_TITLE_PARAGRAPH = [
    {"type": "TITLE", "content": "Başlık"},
    {"type": "PARAGRAPH", "content": "Bir paragraf."},
]

SCENARIO_TABLE = [
    {"type": "TABLE", "content": "Tablo 1. Örnek", "tableRows": [["A", "B"], ["1", "2"]]},
]


class FakeProvider(LLMProvider):
    """返回固定内容的 Provider，记录每次调用"""

    def __init__(self, payload: Any = None, raw: str | None = None, api_key: str = "test-key"):
        super().__init__(api_key=api_key, base_url="http://fake", model="fake-model")
        self.raw = raw if raw is not None else json.dumps(payload, ensure_ascii=False)
        self.calls: list[dict[str, Any]] = []
        self.gate: asyncio.Event | None = None

    @property
    def name(self) -> str:
        return "fake"

    async def invoke(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        response_schema: dict[str, Any] | None = None,
        options: LLMOptions | None = None,
    ) -> LLMResponse:
        self.calls.append({
            "prompt": prompt,
            "system_prompt": system_prompt,
            "response_schema": response_schema,
        })
        if self.gate is not None:
            await self.gate.wait()
        return LLMResponse(content=self.raw, model=self.model)


class FailingProvider(LLMProvider):
    """总是抛出指定异常的 Provider"""

    def __init__(self, error: Exception, api_key: str = "test-key"):
        super().__init__(api_key=api_key, base_url="http://fake", model="fake-model")
        self.error = error
        self.calls = 0

    @property
    def name(self) -> str:
        return "failing"

    async def invoke(self, prompt: str, **kwargs: Any) -> LLMResponse:
        self.calls += 1
        raise self.error


@pytest.fixture
def title_paragraph_document() -> Document:
    return Document(blocks=(
        ContentBlock(type=ContentType.TITLE, content="Başlık"),
        ContentBlock(type=ContentType.PARAGRAPH, content="Bir paragraf."),
    ))


@pytest.fixture
def table_document() -> Document:
    return Document(blocks=(
        ContentBlock(
            type=ContentType.TABLE,
            content="Tablo 1. Örnek",
            table_rows=[["A", "B"], ["1", "2"]],
        ),
    ))


@pytest.fixture
def full_document() -> Document:
    """包含全部六种类型的文档"""
    return Document(blocks=(
        ContentBlock(type=ContentType.TITLE, content="Kitle İletişim Kuramları"),
        ContentBlock(type=ContentType.HEADING, content="GİRİŞ"),
        ContentBlock(type=ContentType.PARAGRAPH, content="İletişim çalışmaları uzun bir geçmişe sahiptir."),
        ContentBlock(type=ContentType.LIST_ITEM, content="Kaynak"),
        ContentBlock(type=ContentType.LIST_ITEM, content="Alıcı"),
        ContentBlock(type=ContentType.BLOCK_QUOTE, content="Uzun bir alıntı metni " * 8),
        ContentBlock(
            type=ContentType.TABLE,
            content="Tablo 1. Lasswell Modeli",
            table_rows=[["Soru", "Analiz Türü"], ["Kim?", "Kontrol analizi"], ["Ne?", "İçerik analizi"]],
        ),
        ContentBlock(type=ContentType.HEADING, content="SONUÇ"),
        ContentBlock(type=ContentType.PARAGRAPH, content="Sonuç paragrafı."),
    ))
