"""Wallet service — issue, update and delete digital wallet passes."""

import logging

from django.apps import apps
from django.db import transaction

from volta.conf import load_backend
from volta.contrib.privacy.utils import (
    create_audit_entry,
    privacy_compliant_pass_data,
    validate_lgpd_compliance,
)
from volta.contrib.wallet.passes import initial_fields, safe_wallet_operation, stamp_fields
from volta.contrib.wallet.retry import RetryQueue
from volta.exceptions import VoltaError, WalletPassError
from volta.gates import GateError, Gates
from volta.models import Business, Customer, CustomerLoyaltyCard, EnrollmentStatusChoices
from volta.protocols.wallet import PassData, PassUpdate, WalletPassBackend
from volta.services import customer as customer_service

logger = logging.getLogger(__name__)


def _get_wallet_backend(backend: WalletPassBackend | None = None) -> WalletPassBackend:
    """Get the given backend or the configured WALLET_BACKEND."""
    return backend or load_backend("WALLET_BACKEND")


class WalletService:
    """
    Service for wallet pass operations.

    Uses @classmethod for extensibility (consistent with other contrib services).
    Every method accepts ``backend`` to override VOLTA["WALLET_BACKEND"].
    """

    @classmethod
    def create_pass(
        cls,
        customer_id,
        loyalty_card_id,
        business: Business | None = None,
        backend: WalletPassBackend | None = None,
    ) -> CustomerLoyaltyCard:
        """
        Issue a wallet pass for a customer's loyalty card.

        Only minimized data leaves the system: first name, phone, email
        and a hashed external id. If the customer already has a pass for
        the card, the existing enrollment is returned unchanged.

        Args:
            customer_id: Customer id
            loyalty_card_id: Loyalty card id
            business: Restrict the lookup to this business
            backend: Wallet pass backend

        Returns:
            The enrollment carrying passkit_id and install URLs

        Raises:
            VoltaError: CUSTOMER_NOT_FOUND, CONSENT_REQUIRED,
                LGPD_COMPLIANCE_FAILED, CARD_NOT_FOUND, TENANT_MISMATCH,
                WALLET_DISABLED
            WalletPassError: Provider failure
        """
        customer = cls._get_customer(customer_id, business)

        try:
            Gates.wallet_consent(customer)
        except GateError:
            raise VoltaError("CONSENT_REQUIRED", customer_id=str(customer.pk))

        compliance = validate_lgpd_compliance(
            customer.pk,
            ["name", "phone"] + (["email"] if customer.email else []),
            consent_date=(customer.consent or {}).get("consent_date"),
            created_at=customer.enrollment_date,
        )
        if not compliance.is_compliant:
            logger.warning(
                "LGPD compliance issues for customer %s***: %s",
                str(customer.pk)[:8],
                compliance.issues,
            )
            if compliance.critical_issues:
                raise VoltaError(
                    "LGPD_COMPLIANCE_FAILED",
                    message=f"LGPD compliance error: {', '.join(compliance.critical_issues)}",
                    details=compliance.issues,
                )

        card = customer_service.get_active_card(loyalty_card_id)
        try:
            Gates.tenant_isolation(customer.business_id, card.business_id)
        except GateError:
            raise VoltaError("TENANT_MISMATCH")

        if not card.wallet_enabled:
            raise VoltaError("WALLET_DISABLED", loyalty_card_id=str(card.pk))

        existing = CustomerLoyaltyCard.objects.filter(customer=customer, loyalty_card=card).first()
        if existing and existing.passkit_id:
            logger.info("Pass already exists: card=%s", existing.pk)
            return existing

        privacy_data = privacy_compliant_pass_data(customer, card.business_id)
        pass_data = PassData(
            template_id=str(card.pk),
            external_id=privacy_data.external_id,
            person=privacy_data.person,
            fields=initial_fields(card.card_rules),
        )
        wallet = _get_wallet_backend(backend)
        response = safe_wallet_operation(lambda: wallet.create_member(pass_data), "pass creation")

        with transaction.atomic():
            enrollment, _ = CustomerLoyaltyCard.objects.get_or_create(
                customer=customer,
                loyalty_card=card,
                defaults={
                    "current_stamps": 0,
                    "total_redeemed": 0,
                    "status": EnrollmentStatusChoices.ACTIVE,
                },
            )
            enrollment.passkit_id = response.pass_id
            enrollment.wallet_pass_url = response.apple_wallet_url
            enrollment.google_pay_url = response.google_pay_url
            enrollment.qr_code = response.qr_code
            enrollment.save(update_fields=[
                "passkit_id",
                "wallet_pass_url",
                "google_pay_url",
                "qr_code",
                "updated_at",
            ])

        logger.info(
            "Wallet pass created: pass=%s customer=%s card=%s",
            response.pass_id,
            privacy_data.customer_reference,
            card.pk,
        )
        cls._audit(
            customer,
            {"action": "passkit_pass_created", "pass_id": response.pass_id, "loyalty_card_id": str(card.pk)},
            ["Dados minimizados enviados para PassKit", "External ID não-identificável usado"],
        )
        return enrollment

    @classmethod
    def update_pass_stamps(
        cls,
        enrollment: CustomerLoyaltyCard,
        backend: WalletPassBackend | None = None,
    ) -> bool:
        """
        Push the enrollment's stamp balance to its pass.

        Returns:
            False if skipped (wallet disabled for the card or no pass issued)

        Raises:
            WalletPassError: Provider failure
        """
        card = enrollment.loyalty_card
        if not card.wallet_enabled or not enrollment.passkit_id:
            logger.debug("Skipping wallet update for %s: wallet disabled or no pass", enrollment.pk)
            return False

        required = card.card_rules.stamps_required
        completed = enrollment.status == EnrollmentStatusChoices.COMPLETED
        update = PassUpdate(
            pass_id=enrollment.passkit_id,
            fields=stamp_fields(enrollment.current_stamps, required, completed),
        )
        wallet = _get_wallet_backend(backend)
        safe_wallet_operation(lambda: wallet.update_member(update), "pass update")

        logger.info(
            "Wallet pass updated: pass=%s stamps=%s/%s completed=%s",
            enrollment.passkit_id,
            enrollment.current_stamps,
            required,
            completed,
        )
        return True

    @classmethod
    def delete_pass(
        cls,
        enrollment: CustomerLoyaltyCard,
        backend: WalletPassBackend | None = None,
    ) -> bool:
        """
        Delete the pass at the provider and clear the wallet fields.

        Returns:
            False if the enrollment has no pass

        Raises:
            WalletPassError: Provider failure (fields are kept)
        """
        if not enrollment.passkit_id:
            return False

        pass_id = enrollment.passkit_id
        wallet = _get_wallet_backend(backend)
        safe_wallet_operation(lambda: wallet.delete_member(pass_id), "pass deletion")

        enrollment.passkit_id = ""
        enrollment.wallet_pass_url = ""
        enrollment.google_pay_url = ""
        enrollment.save(update_fields=["passkit_id", "wallet_pass_url", "google_pay_url", "updated_at"])

        logger.info("Wallet pass deleted: pass=%s", pass_id)
        return True

    @classmethod
    def sync_after_stamps(
        cls,
        enrollment: CustomerLoyaltyCard,
        stamps_added: int,
        backend: WalletPassBackend | None = None,
    ) -> bool:
        """
        Update the pass after a stamp grant. Never raises.

        A provider failure queues the update in the RetryQueue.
        """
        try:
            return cls.update_pass_stamps(enrollment, backend=backend)
        except WalletPassError as exc:
            logger.warning("Wallet update failed for %s: %s", enrollment.pk, exc.message)
            RetryQueue.enqueue(enrollment, stamps_added, error=exc.message)
            return False

    @classmethod
    def health(cls, backend: WalletPassBackend | None = None) -> bool:
        """Provider health. False on any provider error."""
        try:
            return bool(_get_wallet_backend(backend).health())
        except Exception:
            logger.exception("Wallet health check failed")
            return False

    # ======================================================================
    # Internals
    # ======================================================================

    @classmethod
    def _get_customer(cls, customer_id, business: Business | None) -> Customer:
        if business is not None:
            return customer_service.get_for_business(business, customer_id)
        pk = customer_service.parse_id(customer_id)
        customer = Customer.objects.filter(pk=pk).first() if pk else None
        if customer is None:
            raise VoltaError("CUSTOMER_NOT_FOUND", customer_id=str(customer_id))
        return customer

    @classmethod
    def _audit(cls, customer: Customer, details: dict, notes: list[str]) -> None:
        entry = create_audit_entry("data_export", customer.pk, "system", details, notes)
        if apps.is_installed("volta.contrib.privacy"):
            from volta.contrib.privacy.service import PrivacyService

            PrivacyService.record(entry, business=customer.business)
        else:
            logger.info("Privacy audit: %s %s", entry["action"], entry["customer_reference"])
