"""
LLM Provider 实现

- GeminiProvider：Google Gemini REST 接口，支持 responseSchema 约束输出
- OpenAICompatibleProvider：OpenAI 兼容接口（DeepSeek、Kimi、OpenAI 等）
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from ..models import LLMOptions
from .base import LLMProvider, LLMResponse


SCHEMA_HINT = "Yanıtı yalnızca aşağıdaki JSON şemasına uyan geçerli bir JSON olarak ver:\n{schema}"


class OpenAICompatibleProvider(LLMProvider):
    """
    OpenAI 兼容接口 Provider

    不发送 response_format（JSON 模式要求顶层对象，输出约定为顶层数组）；
    要求 JSON 输出时把 response_schema 附加到系统提示词
    """

    @property
    def name(self) -> str:
        return "openai_compatible"

    async def invoke(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        response_schema: dict[str, Any] | None = None,
        options: LLMOptions | None = None,
    ) -> LLMResponse:
        options = options or LLMOptions()

        if options.json_output and response_schema:
            schema_hint = SCHEMA_HINT.format(
                schema=json.dumps(response_schema, ensure_ascii=False)
            )
            system_prompt = f"{system_prompt}\n\n{schema_hint}" if system_prompt else schema_hint

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": options.max_tokens,
            "temperature": options.temperature,
            "top_p": options.top_p,
        }

        async with httpx.AsyncClient(timeout=options.timeout) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers=headers,
                json=payload,
            )
            response.raise_for_status()
            data = response.json()

        content = data["choices"][0]["message"]["content"] or ""
        usage = data.get("usage", {})

        return LLMResponse(
            content=content,
            model=data.get("model", self.model),
            usage={
                "prompt_tokens": usage.get("prompt_tokens", 0),
                "completion_tokens": usage.get("completion_tokens", 0),
                "total_tokens": usage.get("total_tokens", 0),
            },
        )


class DeepSeekProvider(OpenAICompatibleProvider):
    """DeepSeek Provider"""

    @property
    def name(self) -> str:
        return "deepseek"


class GeminiProvider(LLMProvider):
    """Google Gemini Provider（generateContent 接口）"""

    @property
    def name(self) -> str:
        return "gemini"

    async def invoke(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        response_schema: dict[str, Any] | None = None,
        options: LLMOptions | None = None,
    ) -> LLMResponse:
        options = options or LLMOptions()

        generation_config: dict[str, Any] = {
            "maxOutputTokens": options.max_tokens,
            "temperature": options.temperature,
            "topP": options.top_p,
        }
        if options.json_output:
            generation_config["responseMimeType"] = "application/json"
            if response_schema:
                generation_config["responseSchema"] = response_schema

        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

        async with httpx.AsyncClient(timeout=options.timeout) as client:
            response = await client.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                headers=headers,
                json=payload,
            )
            response.raise_for_status()
            data = response.json()

        candidates = data.get("candidates") or []
        parts = candidates[0].get("content", {}).get("parts", []) if candidates else []
        content = "".join(part.get("text", "") for part in parts)
        usage = data.get("usageMetadata", {})

        return LLMResponse(
            content=content,
            model=data.get("modelVersion", self.model),
            usage={
                "prompt_tokens": usage.get("promptTokenCount", 0),
                "completion_tokens": usage.get("candidatesTokenCount", 0),
                "total_tokens": usage.get("totalTokenCount", 0),
            },
        )


DEFAULT_BASE_URLS = {
    "gemini": "https://generativelanguage.googleapis.com/v1beta",
    "deepseek": "https://api.deepseek.com/v1",
    "openai_compatible": "https://api.openai.com/v1",
}


def create_provider(
    provider_type: str,
    api_key: str,
    base_url: str | None,
    model: str,
) -> LLMProvider:
    """
    工厂方法：创建 LLM Provider

    Args:
        provider_type: 提供商类型 (gemini, deepseek, openai_compatible)
        api_key: API Key
        base_url: Base URL，为空时使用该提供商的默认地址
        model: 模型名称

    Returns:
        LLMProvider 实例
    """
    providers: dict[str, type[LLMProvider]] = {
        "gemini": GeminiProvider,
        "deepseek": DeepSeekProvider,
        "openai_compatible": OpenAICompatibleProvider,
    }

    provider_class = providers.get(provider_type, OpenAICompatibleProvider)
    if not base_url:
        base_url = DEFAULT_BASE_URLS.get(provider_type, DEFAULT_BASE_URLS["openai_compatible"])
    return provider_class(
        api_key=api_key,
        base_url=base_url,
        model=model,
    )
