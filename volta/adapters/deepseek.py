"""DeepSeek CompletionBackend adapter (OpenAI-compatible API)."""

import logging

from openai import OpenAI

from volta.conf import volta_settings

logger = logging.getLogger(__name__)

PLACEHOLDER_KEYS = {"", "sk-placeholder-key-for-build"}


class DeepSeekCompletionBackend:
    """
    Adapter that implements CompletionBackend with the openai SDK pointed
    at DeepSeek.

    Configuration in settings.py:
        VOLTA = {
            "AI_BACKEND": "volta.adapters.deepseek.DeepSeekCompletionBackend",
            "DEEPSEEK_API_KEY": env("DEEPSEEK_API_KEY"),
            "DEEPSEEK_BASE_URL": "https://api.deepseek.com/v1",
            "DEEPSEEK_MODEL": "deepseek-chat",
        }
    """

    def __init__(self, api_key: str | None = None, base_url: str | None = None, model: str | None = None):
        self.api_key = volta_settings.DEEPSEEK_API_KEY if api_key is None else api_key
        self.base_url = base_url or volta_settings.DEEPSEEK_BASE_URL
        self.model = model or volta_settings.DEEPSEEK_MODEL
        self._client = None

    @property
    def available(self) -> bool:
        return self.api_key not in PLACEHOLDER_KEYS

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def complete(
        self,
        system: str,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ValueError("Empty response from DeepSeek API")
        return content
