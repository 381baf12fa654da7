"""
Volta Privacy - LGPD tooling for customer and wallet pass data.

Non-identifying external ids for pass providers, anonymization for logs,
retention checks, and the data subject requests (export, delete,
anonymize) on wallet pass data, each recorded in an audit log.

Usage:
    INSTALLED_APPS = [
        ...
        "volta",
        "volta.contrib.privacy",
    ]

    from volta.contrib.privacy import PrivacyService

    result = PrivacyService.wallet_data(business, customer_id, "export")
"""


def __getattr__(name):
    if name == "PrivacyService":
        from volta.contrib.privacy.service import PrivacyService

        return PrivacyService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["PrivacyService"]
