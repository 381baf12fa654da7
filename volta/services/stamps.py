"""Stamp service — grant stamps, reset cards, and read stamp history.

The accrual arithmetic lives in volta.accrual (pure). This module does the
I/O around it: tenant scoping, card selection, daily limits, the locked
read-modify-write of the enrollment, the transaction log, and the
post-commit side effects (signals, wallet pass sync).
"""

import logging
from dataclasses import dataclass

from django.apps import apps
from django.db import DatabaseError, transaction

from volta.accrual import (
    AccrualResult,
    CardSelectionError,
    EnrollmentStatus,
    apply_stamps,
    select_enrollment,
)
from volta.exceptions import VoltaError
from volta.gates import GateError, Gates
from volta.models import (
    Business,
    CustomerLoyaltyCard,
    StampTransaction,
    StampTransactionType,
)
from volta.services import customer as customer_service
from volta.signals import card_completed, stamps_added

logger = logging.getLogger(__name__)

MANUAL_STAMP_NOTE = "Selo adicionado manualmente via dashboard"


@dataclass
class StampResult:
    """Outcome of a stamp grant."""

    enrollment: CustomerLoyaltyCard
    stamps_added: int
    current_stamps: int
    status: str
    total_redeemed: int
    completed_now: bool = False

    def as_response(self) -> dict:
        """Response body for the stamp endpoint."""
        return {
            "ok": True,
            "current_stamps": self.current_stamps,
            "status": self.status,
            "total_redeemed": self.total_redeemed,
        }


class StampService:
    """
    Service for stamp operations.

    Uses @classmethod for extensibility (consistent with the contrib services).
    All enrollment mutations run inside transaction.atomic() with the
    enrollment row locked (select_for_update), so concurrent grants on the
    same card serialize instead of losing updates.
    """

    @classmethod
    def add_stamps(
        cls,
        business: Business,
        customer_id,
        stamps,
        loyalty_card_id=None,
        transaction_type: str = StampTransactionType.MANUAL,
        notes: str = MANUAL_STAMP_NOTE,
        created_by: str = "",
        wallet_backend=None,
    ) -> StampResult:
        """
        Grant stamps to a customer's loyalty card.

        Args:
            business: Authenticated business (tenant)
            customer_id: Customer id (must belong to the business)
            stamps: Stamps to grant (positive integer)
            loyalty_card_id: Card to stamp; required when the customer has
                more than one card in this business
            transaction_type: manual, qr_scan or import
            notes: Note stored on the transaction
            created_by: Who granted the stamps
            wallet_backend: Wallet pass backend (defaults to VOLTA["WALLET_BACKEND"])

        Returns:
            StampResult with the persisted progress

        Raises:
            VoltaError: CUSTOMER_REQUIRED, INVALID_STAMPS, CUSTOMER_NOT_FOUND,
                ENROLLMENT_NOT_FOUND, CARD_NOT_FOUND, CARD_SELECTION_AMBIGUOUS,
                DAILY_LIMIT_REACHED, PERSISTENCE_FAILED
        """
        if not customer_id:
            raise VoltaError("CUSTOMER_REQUIRED")
        try:
            Gates.stamp_amount(stamps)
        except GateError:
            raise VoltaError("INVALID_STAMPS", stamps=stamps)

        customer = customer_service.get_for_business(business, customer_id)
        selected = cls._select(customer, business, loyalty_card_id)

        try:
            with transaction.atomic():
                enrollment = cls._lock(selected.pk)
                rules = enrollment.loyalty_card.card_rules

                try:
                    Gates.daily_stamp_limit(enrollment, rules.max_stamps_per_day)
                except GateError as exc:
                    raise VoltaError("DAILY_LIMIT_REACHED", message=exc.message, **exc.details)

                result = apply_stamps(enrollment.state, rules.stamps_required, stamps)

                StampTransaction.objects.create(
                    enrollment=enrollment,
                    stamps_added=stamps,
                    transaction_type=transaction_type,
                    notes=notes,
                    created_by=created_by,
                )
                cls._write_back(enrollment, result)
        except DatabaseError as exc:
            logger.exception("Stamp grant failed for card %s", selected.pk)
            raise VoltaError("PERSISTENCE_FAILED", details=str(exc))

        try:
            customer_service.record_visit(customer)
        except DatabaseError:
            logger.warning("Could not record visit for customer %s", customer.pk, exc_info=True)

        logger.info(
            "Stamps added: card=%s stamps=%s total=%s status=%s",
            enrollment.pk,
            stamps,
            result.new_stamp_count,
            result.new_status,
        )

        stamps_added.send(sender=CustomerLoyaltyCard, enrollment=enrollment, stamps=stamps)
        if result.completed_now:
            card_completed.send(sender=CustomerLoyaltyCard, enrollment=enrollment)

        cls._sync_wallet(enrollment, stamps, wallet_backend)

        return StampResult(
            enrollment=enrollment,
            stamps_added=stamps,
            current_stamps=result.new_stamp_count,
            status=result.new_status,
            total_redeemed=result.new_total_redeemed,
            completed_now=result.completed_now,
        )

    @classmethod
    def reset_enrollment(
        cls,
        business: Business,
        enrollment_id,
        created_by: str = "",
    ) -> CustomerLoyaltyCard:
        """
        Start a new stamp cycle on a card (after the reward was handed over).

        current_stamps goes back to 0 and status to active. total_redeemed is
        kept: it counts completed cycles.

        Raises:
            VoltaError: ENROLLMENT_NOT_FOUND, TENANT_MISMATCH
        """
        selected = customer_service.get_enrollment_for_business(business, enrollment_id)

        with transaction.atomic():
            enrollment = cls._lock(selected.pk)
            enrollment.current_stamps = 0
            enrollment.status = EnrollmentStatus.ACTIVE
            enrollment.save(update_fields=["current_stamps", "status", "updated_at"])

            StampTransaction.objects.create(
                enrollment=enrollment,
                stamps_added=0,
                transaction_type=StampTransactionType.RESET,
                notes="Cartão reiniciado",
                created_by=created_by,
            )

        logger.info("Card reset: %s", enrollment.pk)
        return enrollment

    @classmethod
    def history(
        cls,
        business: Business,
        limit: int = 50,
        customer_id=None,
    ) -> list[StampTransaction]:
        """Recent stamp transactions of the business (most recent first)."""
        qs = StampTransaction.objects.filter(
            enrollment__loyalty_card__business=business,
        ).select_related("enrollment__customer", "enrollment__loyalty_card")
        if customer_id:
            qs = qs.filter(enrollment__customer_id=customer_service.parse_id(customer_id))
        return list(qs[:limit])

    # ======================================================================
    # Internals
    # ======================================================================

    @classmethod
    def _select(cls, customer, business, loyalty_card_id) -> CustomerLoyaltyCard:
        enrollments = customer_service.enrollments_for_business(customer, business)
        if not enrollments:
            raise VoltaError("ENROLLMENT_NOT_FOUND", customer_id=str(customer.pk))
        try:
            return select_enrollment(enrollments, loyalty_card_id)
        except CardSelectionError as exc:
            if exc.reason == CardSelectionError.AMBIGUOUS:
                raise VoltaError("CARD_SELECTION_AMBIGUOUS", cards=len(enrollments))
            raise VoltaError(
                "CARD_NOT_FOUND",
                message="Specified loyalty card not found for this customer",
                loyalty_card_id=str(loyalty_card_id),
            )

    @classmethod
    def _lock(cls, enrollment_id) -> CustomerLoyaltyCard:
        """
        Get the enrollment with a row-level lock.

        MUST be called inside transaction.atomic().
        """
        return (
            CustomerLoyaltyCard.objects
            .select_for_update()
            .select_related("loyalty_card", "customer")
            .get(pk=enrollment_id)
        )

    @classmethod
    def _write_back(cls, enrollment: CustomerLoyaltyCard, result: AccrualResult) -> None:
        """Persist exactly the three progress fields."""
        enrollment.current_stamps = result.new_stamp_count
        enrollment.status = result.new_status
        enrollment.total_redeemed = result.new_total_redeemed
        enrollment.save(update_fields=[
            "current_stamps",
            "status",
            "total_redeemed",
            "updated_at",
        ])

    @classmethod
    def _sync_wallet(cls, enrollment, stamps: int, backend=None) -> None:
        """Push the new balance to the wallet pass. Never fails the grant."""
        if not apps.is_installed("volta.contrib.wallet"):
            return
        from volta.contrib.wallet.service import WalletService

        WalletService.sync_after_stamps(enrollment, stamps, backend=backend)
