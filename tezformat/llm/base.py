"""
LLM Provider 接口

结构化器只依赖这里的约定：一次 invoke 返回模型的原始文本，
传输层错误（httpx 异常）原样抛出，由 DocumentStructurer 统一转换为 StructuringFailure。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from ..models import LLMOptions


class LLMResponse(BaseModel):
    """单次调用的结果：原始文本 + 用量统计"""
    content: str = Field(..., description="模型返回的原始文本（期望为 JSON 数组）")
    model: str = Field(..., description="实际响应的模型名称")
    usage: dict[str, int] = Field(default_factory=dict, description="prompt/completion/total token 数")


class LLMProvider(ABC):
    """
    结构化所用的模型后端

    base_url 去掉末尾的 "/"；api_key 为空时结构化器不会调用 invoke。
    """

    def __init__(self, api_key: str, base_url: str, model: str):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model

    @property
    @abstractmethod
    def name(self) -> str:
        """后端标识（gemini / deepseek / openai_compatible）"""

    @abstractmethod
    async def invoke(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        response_schema: dict[str, Any] | None = None,
        options: LLMOptions | None = None,
    ) -> LLMResponse:
        """
        发送一次结构化请求

        Args:
            prompt: 含原始文本的用户消息
            system_prompt: 固定的排版指令
            response_schema: 内容块数组的 JSON 结构；能原生约束输出的后端直接传递，
                其余后端在 options.json_output 为真时写入提示词
            options: 调用选项

        Raises:
            httpx.HTTPError: 网络错误或非 2xx 响应
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.name} ({self.model})>"
