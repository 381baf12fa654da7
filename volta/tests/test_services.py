"""
Tests for core services: business resolution, enrollment, card assignment,
and the phone/email utilities.
"""

from unittest.mock import MagicMock

import pytest
from django.contrib.auth.models import AnonymousUser

from volta.exceptions import VoltaError
from volta.models import Customer, CustomerLoyaltyCard, LoyaltyCard
from volta.services import business as business_service
from volta.services import customer as customer_service
from volta.signals import customer_enrolled
from volta.utils import is_valid_email, normalize_phone, validate_phone


# ═══════════════════════════════════════════════════════════════════
# Utils
# ═══════════════════════════════════════════════════════════════════


class TestPhoneUtils:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("(41) 99999-0001", "+5541999990001"),
            ("+55 41 99999 0001", "+5541999990001"),
            ("5541999990001", "+5541999990001"),
            ("(55) 99999-0001", "+5555999990001"),
            ("554199990001", "+554199990001"),
            ("", ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_phone(raw, region_prefix="55") == expected

    def test_validate_ok(self):
        assert validate_phone("41 99999-0001") == (True, "+5541999990001", "")

    @pytest.mark.parametrize("raw", ["123", "12345678901234"])
    def test_validate_length(self, raw):
        valid, _, error = validate_phone(raw)

        assert valid is False
        assert error == "Telefone deve ter entre 10 e 13 dígitos"

    def test_validate_missing(self):
        assert validate_phone("") == (False, "", "Telefone é obrigatório")

    def test_email(self):
        assert is_valid_email("") is True
        assert is_valid_email("a@b.co") is True
        assert is_valid_email("not-an-email") is False


# ═══════════════════════════════════════════════════════════════════
# Business resolution
# ═══════════════════════════════════════════════════════════════════


@pytest.mark.django_db
class TestBusinessService:
    def test_get_for_email_case_insensitive(self, business):
        assert business_service.get_for_email("DONO@cantina.com.br") == business

    def test_unknown_email(self, business):
        with pytest.raises(VoltaError) as exc:
            business_service.get_for_email("x@y.com")

        assert exc.value.code == "BUSINESS_NOT_FOUND"
        assert exc.value.http_status == 404

    def test_empty_email(self):
        with pytest.raises(VoltaError) as exc:
            business_service.get_for_email("")

        assert exc.value.code == "BUSINESS_NOT_FOUND"

    def test_anonymous_user(self):
        with pytest.raises(VoltaError) as exc:
            business_service.get_for_user(AnonymousUser())

        assert exc.value.code == "AUTHENTICATION_REQUIRED"
        assert exc.value.http_status == 401

    def test_user(self, user, business):
        assert business_service.get_for_user(user) == business


# ═══════════════════════════════════════════════════════════════════
# Enrollment
# ═══════════════════════════════════════════════════════════════════


@pytest.mark.django_db
class TestEnroll:
    def test_new_customer(self, card, business):
        customer, enrollment, created = customer_service.enroll(
            card.pk,
            "João Souza",
            "(41) 98888-7777",
            email="JOAO@Example.com",
            custom_fields={"aniversario": "10/05"},
            consent={"lgpd_accepted": True},
        )

        assert created is True
        assert customer.business == business
        assert customer.phone == "+5541988887777"
        assert customer.email == "joao@example.com"
        assert customer.consent["lgpd_accepted"] is True
        assert "consent_date" in customer.consent
        assert enrollment.current_stamps == 0
        assert enrollment.qr_code.startswith(f"{customer.pk}-{card.pk}-")

    def test_enroll_twice_is_idempotent(self, card):
        customer_service.enroll(card.pk, "João", "41988887777")
        customer, enrollment, created = customer_service.enroll(card.pk, "João Souza", "41988887777")

        assert created is False
        assert Customer.objects.count() == 1
        assert CustomerLoyaltyCard.objects.count() == 1
        assert customer.name == "João Souza"

    def test_existing_customer_new_card(self, business, customer, enrollment):
        second = LoyaltyCard.objects.create(business=business, name="Sobremesa")

        _, enrollment2, created = customer_service.enroll(second.pk, "Maria", customer.phone)

        assert created is True
        assert enrollment2.customer_id == customer.pk

    def test_inactive_card(self, card):
        card.is_active = False
        card.save()

        with pytest.raises(VoltaError) as exc:
            customer_service.enroll(card.pk, "João", "41988887777")

        assert exc.value.code == "CARD_NOT_FOUND"

    def test_missing_fields(self, card):
        with pytest.raises(VoltaError) as exc:
            customer_service.enroll(card.pk, "", "41988887777")

        assert exc.value.code == "INVALID_REQUEST"

    def test_signal(self, card):
        handler = MagicMock()
        customer_enrolled.connect(handler)
        try:
            customer_service.enroll(card.pk, "João", "41988887777")
        finally:
            customer_enrolled.disconnect(handler)

        assert handler.call_count == 1
        assert handler.call_args.kwargs["created"] is True


# ═══════════════════════════════════════════════════════════════════
# Card assignment
# ═══════════════════════════════════════════════════════════════════


@pytest.mark.django_db
class TestAssignCard:
    def test_assign(self, customer, card):
        enrollment = customer_service.assign_card(customer.pk, card.pk)

        assert enrollment.customer == customer
        assert enrollment.loyalty_card == card
        assert enrollment.status == "active"

    def test_already_assigned_returns_existing(self, customer, card, enrollment):
        assert customer_service.assign_card(customer.pk, card.pk).pk == enrollment.pk

    def test_tenant_mismatch(self, customer, other_business):
        foreign = LoyaltyCard.objects.create(business=other_business, name="Outro")

        with pytest.raises(VoltaError) as exc:
            customer_service.assign_card(customer.pk, foreign.pk)

        assert exc.value.code == "TENANT_MISMATCH"
        assert exc.value.http_status == 403

    def test_card_of_other_business_not_found(self, customer, other_business, business):
        foreign = LoyaltyCard.objects.create(business=other_business, name="Outro")

        with pytest.raises(VoltaError) as exc:
            customer_service.assign_card(customer.pk, foreign.pk, business=business)

        assert exc.value.code == "CARD_NOT_FOUND"

    def test_unknown_customer(self, card):
        with pytest.raises(VoltaError) as exc:
            customer_service.assign_card("00000000-0000-0000-0000-000000000000", card.pk)

        assert exc.value.code == "CUSTOMER_NOT_FOUND"

    def test_missing_ids(self):
        with pytest.raises(VoltaError) as exc:
            customer_service.assign_card("", None)

        assert exc.value.message == "Customer ID and Loyalty Card ID are required"


@pytest.mark.django_db
class TestRecordVisit:
    def test_increments(self, customer):
        customer_service.record_visit(customer)
        customer_service.record_visit(customer)

        customer.refresh_from_db()
        assert customer.total_visits == 2
        assert customer.last_visit is not None
