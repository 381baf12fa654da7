"""Wallet pass protocol for digital pass providers."""

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class PassPerson:
    """Minimized person data sent to the provider (first name only)."""

    surname: str
    mobile_number: str
    email_address: str = ""


@dataclass(frozen=True)
class PassData:
    """Data for a new loyalty pass."""

    template_id: str
    external_id: str
    person: PassPerson
    fields: dict = field(default_factory=dict)


@dataclass(frozen=True)
class PassUpdate:
    """Field changes for an existing pass."""

    pass_id: str
    fields: dict = field(default_factory=dict)


@dataclass(frozen=True)
class PassResponse:
    """Provider response for a created pass."""

    pass_id: str
    apple_wallet_url: str
    google_pay_url: str
    qr_code: str


@runtime_checkable
class WalletPassBackend(Protocol):
    """
    Protocol for digital wallet pass providers (Apple Wallet / Google Pay).

    Used by contrib/wallet to issue and update loyalty passes.
    Implemented by adapters/mock_passkit.py.

    Configuration in settings.py:
        VOLTA = {
            "WALLET_BACKEND": "volta.adapters.mock_passkit.MockPassKitBackend",
        }

    Failures are raised as volta.exceptions.WalletPassError.
    """

    def create_member(self, data: PassData) -> PassResponse:
        """
        Create a pass for a customer.

        Args:
            data: Template, external id, person and initial fields

        Returns:
            PassResponse with pass id and install URLs
        """
        ...

    def update_member(self, update: PassUpdate) -> None:
        """Update fields of an existing pass."""
        ...

    def delete_member(self, pass_id: str) -> None:
        """Delete a pass."""
        ...

    def health(self) -> bool:
        """Return True if the provider is reachable."""
        ...
