"""
Volta Gates - Validation rules.

G1: StampAmount - Stamp increment is a positive integer
G2: TenantIsolation - Records from different businesses are never combined
G3: DailyStampLimit - Stamps granted today stay under max_stamps_per_day
G4: WalletConsent - LGPD consent recorded before a wallet pass is issued
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta

from django.db.models import Sum
from django.utils import timezone


class GateError(Exception):
    """Gate validation error."""

    def __init__(self, gate_name: str, message: str, details: dict | None = None):
        self.gate_name = gate_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{gate_name}] {message}")


@dataclass
class GateResult:
    """Result of a gate check."""

    passed: bool
    gate_name: str
    message: str = ""


# =============================================================================
# Gates
# =============================================================================


class Gates:
    """Volta validation gates."""

    # =========================================================================
    # G1: Stamp Amount
    # =========================================================================

    @classmethod
    def stamp_amount(cls, stamps) -> GateResult:
        """
        G1: Stamp increment must be a positive integer.

        Booleans, floats (even 2.0) and numeric strings are rejected: the
        request boundary receives JSON and must send an integer.

        Raises:
            GateError: If stamps is not a positive integer
        """
        if isinstance(stamps, bool) or not isinstance(stamps, int) or stamps <= 0:
            raise GateError(
                "G1_StampAmount",
                "stamps must be a positive integer",
                {"stamps": stamps},
            )
        return GateResult(True, "G1_StampAmount")

    @classmethod
    def check_stamp_amount(cls, stamps) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.stamp_amount(stamps)
            return True
        except GateError:
            return False

    # =========================================================================
    # G2: Tenant Isolation
    # =========================================================================

    @classmethod
    def tenant_isolation(cls, business_id, other_business_id) -> GateResult:
        """
        G2: Two records may only be combined if they share a business.

        Args:
            business_id: Business of the first record
            other_business_id: Business of the second record

        Raises:
            GateError: If the businesses differ
        """
        if str(business_id) != str(other_business_id):
            raise GateError(
                "G2_TenantIsolation",
                "Records belong to different businesses.",
            )
        return GateResult(True, "G2_TenantIsolation")

    @classmethod
    def check_tenant_isolation(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.tenant_isolation(*args, **kwargs)
            return True
        except GateError:
            return False

    # =========================================================================
    # G3: Daily Stamp Limit
    # =========================================================================

    @classmethod
    def stamps_today(cls, enrollment, now: datetime | None = None) -> int:
        """Sum of stamps granted to the enrollment since local midnight, imports excluded."""
        from volta.models import StampTransaction, StampTransactionType

        now = timezone.localtime(now or timezone.now())
        start = timezone.make_aware(datetime.combine(now.date(), time.min), now.tzinfo)
        end = start + timedelta(days=1)

        total = (
            StampTransaction.objects
            .filter(enrollment=enrollment, created_at__gte=start, created_at__lt=end)
            .exclude(transaction_type=StampTransactionType.IMPORT)
            .aggregate(total=Sum("stamps_added"))["total"]
        )
        return total or 0

    @classmethod
    def daily_stamp_limit(
        cls,
        enrollment,
        max_stamps_per_day: int | None,
        now: datetime | None = None,
    ) -> GateResult:
        """
        G3: Stamps already granted today must be below the card's daily limit.

        No limit (None or 0) always passes. The check matches the dashboard
        behavior: a grant is refused once today's total reached the limit,
        regardless of the size of the new grant.

        Raises:
            GateError: If the daily limit was reached
        """
        if not max_stamps_per_day:
            return GateResult(True, "G3_DailyStampLimit", "No limit configured")

        stamps_today = cls.stamps_today(enrollment, now=now)
        if stamps_today >= max_stamps_per_day:
            raise GateError(
                "G3_DailyStampLimit",
                f"Limite diário de {max_stamps_per_day} selo(s) atingido",
                {"stamps_today": stamps_today, "limit": max_stamps_per_day},
            )
        return GateResult(True, "G3_DailyStampLimit")

    @classmethod
    def check_daily_stamp_limit(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.daily_stamp_limit(*args, **kwargs)
            return True
        except GateError:
            return False

    # =========================================================================
    # G4: Wallet Consent
    # =========================================================================

    @classmethod
    def wallet_consent(cls, customer) -> GateResult:
        """
        G4: Customer must have accepted the LGPD terms.

        Wallet passes export personal data (first name, phone) to the pass
        provider, which requires documented consent.

        Raises:
            GateError: If consent is missing
        """
        if not customer.has_lgpd_consent:
            raise GateError(
                "G4_WalletConsent",
                "LGPD consent required for wallet integration",
                {"customer_id": str(customer.pk)},
            )
        return GateResult(True, "G4_WalletConsent")

    @classmethod
    def check_wallet_consent(cls, customer) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.wallet_consent(customer)
            return True
        except GateError:
            return False
