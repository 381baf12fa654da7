"""Text completion protocol for LLM providers."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CompletionBackend(Protocol):
    """
    Protocol for chat-completion providers.

    Used by contrib/ai to write campaign copy and business insights.
    Implemented by adapters/deepseek.py.

    Configuration in settings.py:
        VOLTA = {
            "AI_BACKEND": "volta.adapters.deepseek.DeepSeekCompletionBackend",
            "DEEPSEEK_API_KEY": env("DEEPSEEK_API_KEY"),
        }
    """

    @property
    def available(self) -> bool:
        """False when the provider is not configured."""
        ...

    def complete(
        self,
        system: str,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        """
        Return the model reply for a single system + user prompt.

        Raises:
            Exception: Provider errors are propagated to the caller
        """
        ...
