"""
Volta signals — public event API.

Emitted signals:
- customer_enrolled: Emitted by services.customer.enroll() and assign_card()
- stamps_added: Emitted by StampService.add_stamps() after commit
- card_completed: Emitted by StampService.add_stamps() on the completion transition
"""

from django.dispatch import Signal

# Enrollment signals (emitted by services)
customer_enrolled = Signal()  # sender=CustomerLoyaltyCard, enrollment=..., created=bool

# Stamp signals (emitted after the grant transaction commits)
stamps_added = Signal()  # sender=CustomerLoyaltyCard, enrollment=..., stamps=int
card_completed = Signal()  # sender=CustomerLoyaltyCard, enrollment=...
