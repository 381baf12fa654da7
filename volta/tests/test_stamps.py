"""
Tests for StampService: the stamp grant flow with persistence.

1. Grant below the cap
2. Completion transition (10/7/+5 -> 10 completed, +1 redeemed)
3. Completed card re-application is a no-op on progress
4. Card selection (ambiguous, explicit, not found)
5. Tenant isolation
6. Daily limit
7. Transaction log, visit stats, signals, wallet sync
8. Reset and history
"""

from unittest.mock import MagicMock

import pytest

from volta.exceptions import VoltaError, WalletPassError
from volta.models import (
    CustomerLoyaltyCard,
    LoyaltyCard,
    StampTransaction,
    StampTransactionType,
)
from volta.services.stamps import StampService
from volta.signals import card_completed, stamps_added


@pytest.fixture(autouse=True)
def _enable_db(db):
    """Enable DB access for all tests."""


@pytest.fixture
def second_card(business):
    return LoyaltyCard.objects.create(
        business=business,
        name="Sobremesa",
        rules={"stamps_required": 5},
    )


# ═══════════════════════════════════════════════════════════════════
# Accrual persisted
# ═══════════════════════════════════════════════════════════════════


class TestAddStamps:
    def test_grant_below_cap(self, business, customer, enrollment):
        enrollment.current_stamps = 2
        enrollment.save()

        result = StampService.add_stamps(business, customer.pk, 3)

        enrollment.refresh_from_db()
        assert result.current_stamps == 5
        assert result.status == "active"
        assert enrollment.current_stamps == 5
        assert enrollment.status == "active"
        assert enrollment.total_redeemed == 0

    def test_completion_with_surplus(self, business, customer, enrollment):
        enrollment.current_stamps = 7
        enrollment.save()

        result = StampService.add_stamps(business, customer.pk, 5)

        enrollment.refresh_from_db()
        assert result.completed_now is True
        assert enrollment.current_stamps == 10
        assert enrollment.status == "completed"
        assert enrollment.total_redeemed == 1

    def test_completed_card_unchanged(self, business, customer, enrollment):
        enrollment.current_stamps = 10
        enrollment.status = "completed"
        enrollment.total_redeemed = 1
        enrollment.save()

        result = StampService.add_stamps(business, customer.pk, 2)

        enrollment.refresh_from_db()
        assert result.completed_now is False
        assert enrollment.current_stamps == 10
        assert enrollment.status == "completed"
        assert enrollment.total_redeemed == 1

    def test_response_body(self, business, customer, enrollment):
        result = StampService.add_stamps(business, customer.pk, 1)

        assert result.as_response() == {
            "ok": True,
            "current_stamps": 1,
            "status": "active",
            "total_redeemed": 0,
        }

    def test_customer_id_as_string(self, business, customer, enrollment):
        result = StampService.add_stamps(business, str(customer.pk), 1)

        assert result.current_stamps == 1


# ═══════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════


class TestAddStampsValidation:
    def test_customer_required(self, business):
        with pytest.raises(VoltaError) as exc:
            StampService.add_stamps(business, None, 1)

        assert exc.value.code == "CUSTOMER_REQUIRED"

    @pytest.mark.parametrize("stamps", [0, -1, 1.5, "2", True, None])
    def test_invalid_stamps(self, business, customer, enrollment, stamps):
        with pytest.raises(VoltaError) as exc:
            StampService.add_stamps(business, customer.pk, stamps)

        assert exc.value.code == "INVALID_STAMPS"
        assert not StampTransaction.objects.exists()

    def test_unknown_customer(self, business):
        with pytest.raises(VoltaError) as exc:
            StampService.add_stamps(business, "00000000-0000-0000-0000-000000000000", 1)

        assert exc.value.code == "CUSTOMER_NOT_FOUND"
        assert exc.value.http_status == 404

    def test_malformed_customer_id(self, business):
        with pytest.raises(VoltaError) as exc:
            StampService.add_stamps(business, "not-a-uuid", 1)

        assert exc.value.code == "CUSTOMER_NOT_FOUND"

    def test_no_enrollment(self, business, customer):
        with pytest.raises(VoltaError) as exc:
            StampService.add_stamps(business, customer.pk, 1)

        assert exc.value.code == "ENROLLMENT_NOT_FOUND"


# ═══════════════════════════════════════════════════════════════════
# Card selection
# ═══════════════════════════════════════════════════════════════════


class TestCardSelection:
    def test_ambiguous_selection_rejected(self, business, customer, enrollment, second_card):
        CustomerLoyaltyCard.objects.create(customer=customer, loyalty_card=second_card)

        with pytest.raises(VoltaError) as exc:
            StampService.add_stamps(business, customer.pk, 1)

        assert exc.value.code == "CARD_SELECTION_AMBIGUOUS"
        assert exc.value.http_status == 400
        assert not StampTransaction.objects.exists()

    def test_explicit_card(self, business, customer, enrollment, second_card):
        other = CustomerLoyaltyCard.objects.create(customer=customer, loyalty_card=second_card)

        StampService.add_stamps(business, customer.pk, 2, loyalty_card_id=second_card.pk)

        other.refresh_from_db()
        enrollment.refresh_from_db()
        assert other.current_stamps == 2
        assert enrollment.current_stamps == 0

    def test_explicit_card_not_enrolled(self, business, customer, enrollment, second_card):
        with pytest.raises(VoltaError) as exc:
            StampService.add_stamps(business, customer.pk, 1, loyalty_card_id=second_card.pk)

        assert exc.value.code == "CARD_NOT_FOUND"
        assert exc.value.message == "Specified loyalty card not found for this customer"


# ═══════════════════════════════════════════════════════════════════
# Tenant isolation
# ═══════════════════════════════════════════════════════════════════


class TestTenantIsolation:
    def test_other_business_customer_not_found(self, other_business, customer, enrollment):
        with pytest.raises(VoltaError) as exc:
            StampService.add_stamps(other_business, customer.pk, 1)

        assert exc.value.code == "CUSTOMER_NOT_FOUND"
        enrollment.refresh_from_db()
        assert enrollment.current_stamps == 0

    def test_enrollment_in_other_business_card_is_ignored(self, business, other_business, customer, enrollment):
        foreign_card = LoyaltyCard.objects.create(business=other_business, name="Outro")
        CustomerLoyaltyCard.objects.create(customer=customer, loyalty_card=foreign_card)

        result = StampService.add_stamps(business, customer.pk, 1)

        assert result.enrollment.pk == enrollment.pk


# ═══════════════════════════════════════════════════════════════════
# Daily limit
# ═══════════════════════════════════════════════════════════════════


class TestDailyLimit:
    def test_limit_reached(self, business, customer, enrollment, card):
        card.rules = {"stamps_required": 10, "max_stamps_per_day": 2}
        card.save()

        StampService.add_stamps(business, customer.pk, 2)

        with pytest.raises(VoltaError) as exc:
            StampService.add_stamps(business, customer.pk, 1)

        assert exc.value.code == "DAILY_LIMIT_REACHED"
        assert exc.value.data["stamps_today"] == 2
        enrollment.refresh_from_db()
        assert enrollment.current_stamps == 2

    def test_under_limit(self, business, customer, enrollment, card):
        card.rules = {"stamps_required": 10, "max_stamps_per_day": 3}
        card.save()

        StampService.add_stamps(business, customer.pk, 1)
        StampService.add_stamps(business, customer.pk, 1)

        enrollment.refresh_from_db()
        assert enrollment.current_stamps == 2

    def test_imported_progress_not_counted(self, business, customer, enrollment, card):
        card.rules = {"stamps_required": 10, "max_stamps_per_day": 1}
        card.save()
        enrollment.current_stamps = 5
        enrollment.save()
        StampTransaction.objects.create(
            enrollment=enrollment,
            stamps_added=5,
            transaction_type=StampTransactionType.IMPORT,
        )

        result = StampService.add_stamps(business, customer.pk, 1)

        assert result.current_stamps == 6

    def test_no_limit(self, business, customer, enrollment):
        for _ in range(4):
            StampService.add_stamps(business, customer.pk, 2)

        enrollment.refresh_from_db()
        assert enrollment.current_stamps == 8


# ═══════════════════════════════════════════════════════════════════
# Side effects
# ═══════════════════════════════════════════════════════════════════


class TestSideEffects:
    def test_transaction_logged(self, business, customer, enrollment):
        StampService.add_stamps(business, customer.pk, 3, created_by="dono@cantina.com.br")

        tx = StampTransaction.objects.get()
        assert tx.enrollment_id == enrollment.pk
        assert tx.stamps_added == 3
        assert tx.transaction_type == StampTransactionType.MANUAL
        assert tx.notes == "Selo adicionado manualmente via dashboard"
        assert tx.created_by == "dono@cantina.com.br"

    def test_transaction_records_granted_not_credited(self, business, customer, enrollment):
        enrollment.current_stamps = 9
        enrollment.save()

        StampService.add_stamps(business, customer.pk, 4)

        assert StampTransaction.objects.get().stamps_added == 4

    def test_visit_recorded(self, business, customer, enrollment):
        StampService.add_stamps(business, customer.pk, 1)

        customer.refresh_from_db()
        assert customer.total_visits == 1
        assert customer.last_visit is not None

    def test_signals(self, business, customer, enrollment):
        added, completed = MagicMock(), MagicMock()
        stamps_added.connect(added)
        card_completed.connect(completed)
        try:
            enrollment.current_stamps = 9
            enrollment.save()
            StampService.add_stamps(business, customer.pk, 1)
        finally:
            stamps_added.disconnect(added)
            card_completed.disconnect(completed)

        assert added.call_count == 1
        assert added.call_args.kwargs["stamps"] == 1
        assert completed.call_count == 1

    def test_no_completed_signal_below_cap(self, business, customer, enrollment):
        completed = MagicMock()
        card_completed.connect(completed)
        try:
            StampService.add_stamps(business, customer.pk, 1)
        finally:
            card_completed.disconnect(completed)

        assert completed.call_count == 0

    def test_wallet_pass_synced(self, business, customer, wallet_card):
        enrollment = CustomerLoyaltyCard.objects.create(
            customer=customer,
            loyalty_card=wallet_card,
            passkit_id="pass-1",
        )
        backend = MagicMock()

        StampService.add_stamps(business, customer.pk, 2, wallet_backend=backend)

        update = backend.update_member.call_args.args[0]
        assert update.pass_id == "pass-1"
        assert update.fields["balance"]["value"] == "2/8"
        enrollment.refresh_from_db()
        assert enrollment.wallet_retries.count() == 0

    def test_wallet_failure_does_not_fail_grant(self, business, customer, wallet_card):
        enrollment = CustomerLoyaltyCard.objects.create(
            customer=customer,
            loyalty_card=wallet_card,
            passkit_id="pass-1",
        )
        backend = MagicMock()
        backend.update_member.side_effect = WalletPassError("SERVICE_UNAVAILABLE")

        result = StampService.add_stamps(business, customer.pk, 2, wallet_backend=backend)

        assert result.current_stamps == 2
        enrollment.refresh_from_db()
        assert enrollment.current_stamps == 2
        assert enrollment.wallet_retries.filter(status="pending").count() == 1


# ═══════════════════════════════════════════════════════════════════
# Reset and history
# ═══════════════════════════════════════════════════════════════════


class TestReset:
    def test_reset_completed_card(self, business, enrollment):
        enrollment.current_stamps = 10
        enrollment.status = "completed"
        enrollment.total_redeemed = 2
        enrollment.save()

        StampService.reset_enrollment(business, enrollment.pk, created_by="dono")

        enrollment.refresh_from_db()
        assert enrollment.current_stamps == 0
        assert enrollment.status == "active"
        assert enrollment.total_redeemed == 2
        tx = StampTransaction.objects.get()
        assert tx.transaction_type == StampTransactionType.RESET
        assert tx.stamps_added == 0

    def test_reset_does_not_count_toward_daily_limit(self, business, customer, enrollment, card):
        card.rules = {"stamps_required": 10, "max_stamps_per_day": 1}
        card.save()

        StampService.reset_enrollment(business, enrollment.pk)
        StampService.add_stamps(business, customer.pk, 1)

        enrollment.refresh_from_db()
        assert enrollment.current_stamps == 1

    def test_reset_other_business(self, other_business, enrollment):
        with pytest.raises(VoltaError) as exc:
            StampService.reset_enrollment(other_business, enrollment.pk)

        assert exc.value.code == "TENANT_MISMATCH"

    def test_reset_unknown(self, business):
        with pytest.raises(VoltaError) as exc:
            StampService.reset_enrollment(business, "00000000-0000-0000-0000-000000000000")

        assert exc.value.code == "ENROLLMENT_NOT_FOUND"


class TestHistory:
    def test_history_scoped_to_business(self, business, other_business, customer, enrollment):
        StampService.add_stamps(business, customer.pk, 1)
        StampService.add_stamps(business, customer.pk, 2)

        assert [t.stamps_added for t in StampService.history(business)] == [2, 1]
        assert StampService.history(other_business) == []

    def test_history_limit(self, business, customer, enrollment):
        for _ in range(3):
            StampService.add_stamps(business, customer.pk, 1)

        assert len(StampService.history(business, limit=2)) == 2
