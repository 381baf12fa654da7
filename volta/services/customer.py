"""Customer service - lookups, enrollment and card assignment.

All lookups that take an identifier from a request are scoped to the
authenticated business. All write operations that touch >1 record use
transaction.atomic().
"""

import logging
import time
import uuid

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from volta.exceptions import VoltaError
from volta.gates import GateError, Gates
from volta.models import (
    Business,
    Customer,
    CustomerLoyaltyCard,
    EnrollmentStatusChoices,
    LoyaltyCard,
)
from volta.signals import customer_enrolled
from volta.utils import normalize_phone

logger = logging.getLogger(__name__)


def parse_id(value) -> uuid.UUID | None:
    """Parse a UUID from request input. Returns None if malformed."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def get_for_business(business: Business, customer_id) -> Customer:
    """
    Get a customer that belongs to the business.

    Raises:
        VoltaError: CUSTOMER_NOT_FOUND (also for other tenants' customers)
    """
    pk = parse_id(customer_id)
    if pk is None:
        raise VoltaError("CUSTOMER_NOT_FOUND", customer_id=str(customer_id))
    try:
        return Customer.objects.get(pk=pk, business=business)
    except Customer.DoesNotExist:
        raise VoltaError("CUSTOMER_NOT_FOUND", customer_id=str(customer_id))


def get_active_card(card_id) -> LoyaltyCard:
    """
    Get an active loyalty card by id.

    Raises:
        VoltaError: CARD_NOT_FOUND
    """
    pk = parse_id(card_id)
    if pk is None:
        raise VoltaError("CARD_NOT_FOUND", loyalty_card_id=str(card_id))
    try:
        return LoyaltyCard.objects.select_related("business").get(pk=pk, is_active=True)
    except LoyaltyCard.DoesNotExist:
        raise VoltaError("CARD_NOT_FOUND", loyalty_card_id=str(card_id))


def enrollments_for_business(customer: Customer, business: Business) -> list[CustomerLoyaltyCard]:
    """Customer's enrollments in cards of the given business (oldest first)."""
    return list(
        CustomerLoyaltyCard.objects.filter(
            customer=customer,
            loyalty_card__business=business,
        )
        .select_related("loyalty_card")
        .order_by("created_at")
    )


def make_qr_code(customer: Customer, card: LoyaltyCard) -> str:
    """QR payload printed on the card: customer-card-epoch_ms."""
    return f"{customer.pk}-{card.pk}-{int(time.time() * 1000)}"


def _create_enrollment(customer: Customer, card: LoyaltyCard) -> tuple[CustomerLoyaltyCard, bool]:
    enrollment, created = CustomerLoyaltyCard.objects.get_or_create(
        customer=customer,
        loyalty_card=card,
        defaults={
            "current_stamps": 0,
            "total_redeemed": 0,
            "status": EnrollmentStatusChoices.ACTIVE,
            "qr_code": make_qr_code(customer, card),
        },
    )
    return enrollment, created


def enroll(
    card_id,
    name: str,
    phone: str,
    email: str = "",
    custom_fields: dict | None = None,
    consent: dict | None = None,
) -> tuple[Customer, CustomerLoyaltyCard, bool]:
    """
    Public enrollment: a customer fills the card's form (QR code at the table).

    The customer is matched by (business, phone) and updated, or created.
    The enrollment is created once; enrolling twice is a no-op.

    Args:
        card_id: Loyalty card id from the enrollment link
        name: Customer name
        phone: Phone number (any format; normalized to +55...)
        email: Email (optional)
        custom_fields: Answers to the card's custom form fields
        consent: Consent flags (lgpd_accepted, marketing, ...)

    Returns:
        (customer, enrollment, enrollment_created)

    Raises:
        VoltaError: INVALID_REQUEST if name/phone missing, CARD_NOT_FOUND
    """
    if not card_id or not name or not phone:
        raise VoltaError("INVALID_REQUEST", message="Missing required fields")

    card = get_active_card(card_id)
    business = card.business
    consent_data = {**(consent or {}), "consent_date": timezone.now().isoformat()}
    phone_normalized = normalize_phone(phone)

    with transaction.atomic():
        customer = Customer.objects.filter(business=business, phone=phone_normalized).first()
        if customer:
            customer.name = name
            customer.email = email or ""
            customer.custom_fields = custom_fields or {}
            customer.consent = consent_data
            customer.save()
        else:
            customer = Customer.objects.create(
                business=business,
                name=name,
                phone=phone_normalized,
                email=email or "",
                custom_fields=custom_fields or {},
                consent=consent_data,
            )
            logger.info("Customer created: %s (business %s)", customer.pk, business.pk)

        enrollment, created = _create_enrollment(customer, card)

    if created:
        customer_enrolled.send(sender=CustomerLoyaltyCard, enrollment=enrollment, created=True)
    return customer, enrollment, created


def assign_card(customer_id, loyalty_card_id, business: Business | None = None) -> CustomerLoyaltyCard:
    """
    Assign a loyalty card to an existing customer (dashboard action).

    When ``business`` is given, the card must belong to it; cards of other
    tenants are reported as not found.

    Raises:
        VoltaError: INVALID_REQUEST, CARD_NOT_FOUND, CUSTOMER_NOT_FOUND,
            TENANT_MISMATCH
    """
    if not customer_id or not loyalty_card_id:
        raise VoltaError(
            "INVALID_REQUEST",
            message="Customer ID and Loyalty Card ID are required",
        )

    card = get_active_card(loyalty_card_id)
    if business is not None and card.business_id != business.pk:
        raise VoltaError("CARD_NOT_FOUND", loyalty_card_id=str(loyalty_card_id))

    pk = parse_id(customer_id)
    customer = Customer.objects.filter(pk=pk).first() if pk else None
    if customer is None:
        raise VoltaError("CUSTOMER_NOT_FOUND", message="Customer not found")

    try:
        Gates.tenant_isolation(customer.business_id, card.business_id)
    except GateError:
        raise VoltaError("TENANT_MISMATCH")

    enrollment, created = _create_enrollment(customer, card)
    if created:
        customer_enrolled.send(sender=CustomerLoyaltyCard, enrollment=enrollment, created=True)
    return enrollment


def record_visit(customer: Customer) -> None:
    """Increment total_visits and stamp last_visit (atomic UPDATE)."""
    now = timezone.now()
    Customer.objects.filter(pk=customer.pk).update(
        total_visits=F("total_visits") + 1,
        last_visit=now,
    )


def get_enrollment_for_business(business: Business, enrollment_id) -> CustomerLoyaltyCard:
    """
    Get an enrollment whose card belongs to the business.

    Raises:
        VoltaError: ENROLLMENT_NOT_FOUND, or TENANT_MISMATCH for another
            business's enrollment
    """
    pk = parse_id(enrollment_id)
    enrollment = (
        CustomerLoyaltyCard.objects.select_related("loyalty_card", "customer").filter(pk=pk).first()
        if pk
        else None
    )
    if enrollment is None:
        raise VoltaError(
            "ENROLLMENT_NOT_FOUND",
            message="Customer loyalty card not found",
            enrollment_id=str(enrollment_id),
        )
    try:
        Gates.tenant_isolation(enrollment.loyalty_card.business_id, business.pk)
    except GateError:
        raise VoltaError("TENANT_MISMATCH", message="Access denied to this loyalty card")
    return enrollment
