"""
Volta Wallet - Apple Wallet / Google Pay loyalty passes.

Issues a pass per enrollment through a WalletPassBackend, keeps the
stamp balance on the pass in sync after each grant, and retries failed
updates from a persistent queue.

Usage:
    INSTALLED_APPS = [
        ...
        "volta",
        "volta.contrib.wallet",
    ]

    from volta.contrib.wallet import WalletService, RetryQueue

    enrollment = WalletService.create_pass(customer_id, loyalty_card_id)
    WalletService.update_pass_stamps(enrollment)
    RetryQueue.process_due()
"""


def __getattr__(name):
    if name == "WalletService":
        from volta.contrib.wallet.service import WalletService

        return WalletService
    if name == "RetryQueue":
        from volta.contrib.wallet.retry import RetryQueue

        return RetryQueue
    if name == "build_template":
        from volta.contrib.wallet.passes import build_template

        return build_template
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["WalletService", "RetryQueue", "build_template"]
