"""AI 文本生成客户端（OpenAI 兼容的 chat completions 接口），用于生成摘要"""

import json
import logging

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class AISummaryConfig(BaseModel):
    """AI 摘要配置"""

    enabled: bool = False
    api_key: str | None = None
    endpoint: str = "https://openrouter.ai/api/v1/chat/completions"
    model: str = "openai/gpt-4o-mini"
    temperature: float = 0.2
    max_tokens: int = 800
    project_context: str = ""


class SummaryClientError(RuntimeError):
    """AI 接口返回格式不正确"""


class SummaryClient:
    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    async def complete(
        self,
        prompt: str,
        config: AISummaryConfig,
        *,
        system_prompt: str,
        max_tokens: int | None = None,
    ) -> str:
        payload = {
            "model": config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": config.temperature,
            "max_tokens": max_tokens or config.max_tokens,
        }

        headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        }

        async with httpx.AsyncClient(timeout=60.0, transport=self._transport) as client:
            response = await client.post(config.endpoint, headers=headers, json=payload)
            response.raise_for_status()
            data = response.json()

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            logger.error("AI 回传格式不符合预期: %s", json.dumps(data, ensure_ascii=False)[:2000])
            raise SummaryClientError("AI 回传格式不正确") from exc

        return (content or "").strip()


summary_client = SummaryClient()
