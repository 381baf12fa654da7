"""Mock PassKit WalletPassBackend adapter."""

import logging
import time

from volta.exceptions import WalletPassError
from volta.protocols.wallet import PassData, PassResponse, PassUpdate

logger = logging.getLogger(__name__)


class MockPassKitBackend:
    """
    In-process stand-in for the PassKit provider.

    Issues deterministic install URLs from the pass external id and keeps
    the created passes in memory. Suitable for development and tests.

    Configuration in settings.py:
        VOLTA = {
            "WALLET_BACKEND": "volta.adapters.mock_passkit.MockPassKitBackend",
        }
    """

    def __init__(self):
        self.passes: dict[str, dict] = {}

    def create_member(self, data: PassData) -> PassResponse:
        pass_id = f"mock-pass-{int(time.time() * 1000)}-{len(self.passes)}"
        self.passes[pass_id] = {"external_id": data.external_id, "fields": dict(data.fields)}
        logger.info(
            "Mock PassKit: created pass %s (template %s, external %s)",
            pass_id,
            data.template_id,
            data.external_id,
        )
        return PassResponse(
            pass_id=pass_id,
            apple_wallet_url=f"https://mock-apple-wallet-url/{data.external_id}",
            google_pay_url=f"https://mock-google-pay-url/{data.external_id}",
            qr_code=f"mock-qr-code-{data.external_id}",
        )

    def update_member(self, update: PassUpdate) -> None:
        if not update.pass_id:
            raise WalletPassError("INVALID_ARGUMENT", pass_id=update.pass_id)
        self.passes.setdefault(update.pass_id, {"fields": {}})["fields"].update(update.fields)
        logger.info("Mock PassKit: updated pass %s (%s)", update.pass_id, ", ".join(update.fields))

    def delete_member(self, pass_id: str) -> None:
        self.passes.pop(pass_id, None)
        logger.info("Mock PassKit: deleted pass %s", pass_id)

    def health(self) -> bool:
        return True
