"""
Volta configuration.

Usage in settings.py:
    VOLTA = {
        "DEFAULT_STAMPS_REQUIRED": 10,
        "DEEPSEEK_API_KEY": env("DEEPSEEK_API_KEY"),
        "WALLET_BACKEND": "volta.adapters.mock_passkit.MockPassKitBackend",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings
from django.utils.module_loading import import_string


@dataclass
class VoltaSettings:
    """Volta configuration settings."""

    # Card rules fallback when a card has no stamps_required
    DEFAULT_STAMPS_REQUIRED: int = 10

    # Country calling code prepended to local phone numbers
    DEFAULT_REGION_PREFIX: str = "55"

    # Public URL used to build wallet pass links
    APP_URL: str = "https://volta-ai.vercel.app"

    # Wallet pass provider
    WALLET_BACKEND: str = "volta.adapters.mock_passkit.MockPassKitBackend"
    WALLET_RETRY_MAX_ATTEMPTS: int = 3
    WALLET_RETRY_BASE_DELAY: float = 1.0
    WALLET_RETRY_MAX_DELAY: float = 30.0

    # AI content generation (OpenAI-compatible API)
    AI_BACKEND: str = "volta.adapters.deepseek.DeepSeekCompletionBackend"
    DEEPSEEK_API_KEY: str = ""
    DEEPSEEK_BASE_URL: str = "https://api.deepseek.com/v1"
    DEEPSEEK_MODEL: str = "deepseek-chat"

    # LGPD
    PRIVACY_HASH_KEY: str = "default-key-change-in-production"
    DATA_RETENTION_DAYS: int = 2555

    # Customer import limits
    IMPORT_MAX_ROWS: int = 1000
    IMPORT_MAX_BYTES: int = 10 * 1024 * 1024


def get_volta_settings() -> VoltaSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "VOLTA", {})
    return VoltaSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_volta_settings(), name)


volta_settings = _LazySettings()


def load_backend(setting_name: str):
    """Instantiate the backend class configured under ``setting_name``."""
    backend_path = getattr(volta_settings, setting_name)
    if not backend_path:
        return None
    backend_class = import_string(backend_path)
    return backend_class()
