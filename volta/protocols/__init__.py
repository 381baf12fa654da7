"""Volta protocols."""

from volta.protocols.completion import CompletionBackend
from volta.protocols.wallet import (
    PassData,
    PassPerson,
    PassResponse,
    PassUpdate,
    WalletPassBackend,
)

__all__ = [
    # Wallet
    "WalletPassBackend",
    "PassData",
    "PassPerson",
    "PassUpdate",
    "PassResponse",
    # AI
    "CompletionBackend",
]
