import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class LLMProvider:
    def chat_json(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
    ) -> str:
        raise NotImplementedError


class OpenAICompatibleLLMProvider(LLMProvider):
    def __init__(
        self,
        api_base: str,
        api_key: str | None,
        model: str,
        timeout_seconds: float,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def chat_json(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
    ) -> str:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": max(0.0, min(1.0, float(temperature))),
            "response_format": {"type": "json_object"},
        }

        with httpx.Client(timeout=self.timeout_seconds, transport=self.transport) as client:
            response = client.post(f"{self.api_base}/chat/completions", headers=headers, json=payload)
            response.raise_for_status()
            body = response.json()

        content = self._message_content(body)
        if not content:
            raise ValueError("Empty response from language model")
        return content

    @staticmethod
    def _message_content(body: Any) -> str:
        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return ""
        return str(content or "").strip()


def build_llm_provider(settings) -> LLMProvider:
    provider_name = settings.llm_provider.lower()

    if provider_name == "openai_compatible" and settings.llm_api_base:
        logger.info("using OpenAI-compatible provider %s (model=%s)", settings.llm_api_base, settings.llm_model)
        return OpenAICompatibleLLMProvider(
            api_base=settings.llm_api_base,
            api_key=settings.llm_api_key,
            model=settings.llm_model,
            timeout_seconds=settings.llm_timeout_seconds,
        )

    raise ValueError("Set ACCORDO_LLM_PROVIDER=openai_compatible and ACCORDO_LLM_API_BASE.")
