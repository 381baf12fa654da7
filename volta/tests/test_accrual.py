"""
Tests for the stamp accrual engine (pure functions, no database).

1. Accrual below the cap keeps the card active
2. Reaching the cap completes the card and credits one redemption
3. Surplus stamps are discarded
4. A completed card is unchanged by further grants
5. Card selection: explicit card, single card, ambiguous, not found
"""

from dataclasses import dataclass

import pytest

from volta.accrual import (
    CardSelectionError,
    EnrollmentState,
    EnrollmentStatus,
    apply_stamps,
    select_enrollment,
)


def state(current, status=EnrollmentStatus.ACTIVE, redeemed=0):
    return EnrollmentState(current_stamps=current, status=status, total_redeemed=redeemed)


# ═══════════════════════════════════════════════════════════════════
# apply_stamps
# ═══════════════════════════════════════════════════════════════════


class TestApplyStamps:
    def test_accrual_below_cap(self):
        result = apply_stamps(state(2), 10, 3)

        assert result.new_stamp_count == 5
        assert result.new_status == EnrollmentStatus.ACTIVE
        assert result.new_total_redeemed == 0
        assert result.completed_now is False

    def test_reaching_cap_completes(self):
        result = apply_stamps(state(9), 10, 1)

        assert result.new_stamp_count == 10
        assert result.new_status == EnrollmentStatus.COMPLETED
        assert result.new_total_redeemed == 1
        assert result.completed_now is True

    def test_surplus_is_discarded(self):
        result = apply_stamps(state(7), 10, 5)

        assert result.new_stamp_count == 10
        assert result.new_status == EnrollmentStatus.COMPLETED
        assert result.new_total_redeemed == 1

    def test_completed_card_is_unchanged(self):
        result = apply_stamps(state(10, EnrollmentStatus.COMPLETED, 1), 10, 3)

        assert result.new_stamp_count == 10
        assert result.new_status == EnrollmentStatus.COMPLETED
        assert result.new_total_redeemed == 1
        assert result.completed_now is False

    def test_previous_redemptions_are_kept(self):
        result = apply_stamps(state(8, redeemed=3), 10, 2)

        assert result.new_total_redeemed == 4

    def test_single_stamp_card(self):
        result = apply_stamps(state(0), 1, 1)

        assert result.new_status == EnrollmentStatus.COMPLETED
        assert result.completed_now is True

    def test_counter_never_exceeds_cap(self):
        for increment in (1, 5, 50, 1000):
            assert apply_stamps(state(4), 10, increment).new_stamp_count <= 10

    def test_result_is_immutable(self):
        result = apply_stamps(state(0), 10, 1)

        with pytest.raises(AttributeError):
            result.new_stamp_count = 3


# ═══════════════════════════════════════════════════════════════════
# select_enrollment
# ═══════════════════════════════════════════════════════════════════


@dataclass
class FakeEnrollment:
    loyalty_card_id: str


class TestSelectEnrollment:
    def test_single_enrollment_without_card(self):
        only = FakeEnrollment("card-a")

        assert select_enrollment([only]) is only

    def test_explicit_card(self):
        a, b = FakeEnrollment("card-a"), FakeEnrollment("card-b")

        assert select_enrollment([a, b], "card-b") is b

    def test_explicit_card_is_case_insensitive(self):
        a = FakeEnrollment("ABC-123")

        assert select_enrollment([a], "abc-123") is a

    def test_ambiguous_without_card(self):
        with pytest.raises(CardSelectionError) as exc:
            select_enrollment([FakeEnrollment("a"), FakeEnrollment("b")])

        assert exc.value.reason == CardSelectionError.AMBIGUOUS

    def test_unknown_card(self):
        with pytest.raises(CardSelectionError) as exc:
            select_enrollment([FakeEnrollment("a")], "z")

        assert exc.value.reason == CardSelectionError.NOT_FOUND

    def test_no_enrollments(self):
        with pytest.raises(CardSelectionError) as exc:
            select_enrollment([])

        assert exc.value.reason == CardSelectionError.NOT_FOUND
