"""Volta services (CORE only).

CORE services are exported here. Contrib services are in their respective modules:
- volta.contrib.wallet: WalletService, RetryQueue
- volta.contrib.ai: AIService
- volta.contrib.privacy: PrivacyService
- volta.contrib.importer: ImportService
"""

from volta.services import business
from volta.services import customer

__all__ = ["business", "customer"]
