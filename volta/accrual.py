"""
Stamp accrual engine.

Pure functions over plain values: no ORM access, no side effects. The
stamp service loads and locks the enrollment, calls apply_stamps(), and
persists the three returned fields.

Rules:
    - Accrual is capped at the card's stamps_required. Surplus stamps are
      discarded, never carried into a next cycle.
    - A completion is credited (total_redeemed += 1) only on the transition
      from below the cap to the cap. An already completed card stays
      completed and earns nothing more until it is explicitly reset.
"""

from dataclasses import dataclass
from typing import Iterable, Protocol, TypeVar


class EnrollmentStatus:
    ACTIVE = "active"
    COMPLETED = "completed"
    EXPIRED = "expired"


@dataclass(frozen=True)
class EnrollmentState:
    """Snapshot of an enrollment's progress."""

    current_stamps: int
    status: str
    total_redeemed: int


@dataclass(frozen=True)
class AccrualResult:
    """Outcome of applying stamps to an enrollment."""

    new_stamp_count: int
    new_status: str
    new_total_redeemed: int
    completed_now: bool = False


def apply_stamps(
    state: EnrollmentState,
    required_stamps: int,
    increment: int,
) -> AccrualResult:
    """
    Apply a stamp increment to an enrollment.

    Inputs are assumed validated (required_stamps > 0, increment > 0;
    see Gates.stamp_amount).

    Args:
        state: Current enrollment progress
        required_stamps: Card's stamps_required
        increment: Stamps being granted

    Returns:
        AccrualResult with the fields to write back
    """
    current = state.current_stamps or 0
    was_completed = current >= required_stamps
    new_stamp_count = min(current + increment, required_stamps)
    now_completed = new_stamp_count >= required_stamps

    new_status = state.status
    new_total_redeemed = state.total_redeemed or 0
    completed_now = False

    if not was_completed and now_completed:
        new_status = EnrollmentStatus.COMPLETED
        new_total_redeemed += 1
        completed_now = True
    elif new_stamp_count < required_stamps:
        new_status = EnrollmentStatus.ACTIVE

    return AccrualResult(
        new_stamp_count=new_stamp_count,
        new_status=new_status,
        new_total_redeemed=new_total_redeemed,
        completed_now=completed_now,
    )


class _HasCard(Protocol):
    loyalty_card_id: object


E = TypeVar("E", bound=_HasCard)


class CardSelectionError(Exception):
    """Raised when no enrollment can be selected unambiguously."""

    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


def select_enrollment(enrollments: Iterable[E], loyalty_card_id=None) -> E:
    """
    Pick the enrollment a stamp grant applies to.

    With an explicit loyalty_card_id, the matching enrollment is used.
    Without one, a single enrollment is used as is; several enrollments
    are ambiguous and the grant is rejected rather than guessed.

    Args:
        enrollments: The customer's enrollments within the tenant
        loyalty_card_id: Explicit card choice (optional)

    Raises:
        CardSelectionError: NOT_FOUND or AMBIGUOUS
    """
    candidates = list(enrollments)

    if loyalty_card_id:
        wanted = str(loyalty_card_id).lower()
        for enrollment in candidates:
            if str(enrollment.loyalty_card_id).lower() == wanted:
                return enrollment
        raise CardSelectionError(CardSelectionError.NOT_FOUND)

    if not candidates:
        raise CardSelectionError(CardSelectionError.NOT_FOUND)
    if len(candidates) > 1:
        raise CardSelectionError(CardSelectionError.AMBIGUOUS)
    return candidates[0]
