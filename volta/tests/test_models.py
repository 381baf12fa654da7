"""Tests for Volta core models and the typed JSON rules."""

import pytest
from django.db import IntegrityError

from volta.models import Business, Customer, CustomerLoyaltyCard, LoyaltyCard
from volta.rules import BusinessSettings, CardDesign, LoyaltyCardRules


# ═══════════════════════════════════════════════════════════════════
# Rules
# ═══════════════════════════════════════════════════════════════════


class TestLoyaltyCardRules:
    def test_defaults(self):
        rules = LoyaltyCardRules.from_json({}, default_stamps_required=10)

        assert rules.stamps_required == 10
        assert rules.max_stamps_per_day is None
        assert rules.expiry_days is None

    def test_values(self):
        rules = LoyaltyCardRules.from_json(
            {"stamps_required": "8", "max_stamps_per_day": 2, "reward_description": "1 pizza"},
            default_stamps_required=10,
        )

        assert rules.stamps_required == 8
        assert rules.max_stamps_per_day == 2
        assert rules.reward_description == "1 pizza"

    @pytest.mark.parametrize("value", [0, -1, "abc", None, True])
    def test_invalid_stamps_required_falls_back(self, value):
        rules = LoyaltyCardRules.from_json({"stamps_required": value}, default_stamps_required=10)

        assert rules.stamps_required == 10

    def test_zero_daily_limit_means_no_limit(self):
        rules = LoyaltyCardRules.from_json({"max_stamps_per_day": 0}, default_stamps_required=10)

        assert rules.max_stamps_per_day is None

    def test_as_json_drops_unset(self):
        rules = LoyaltyCardRules.from_json({"stamps_required": 5}, default_stamps_required=10)

        assert rules.as_json() == {"stamps_required": 5, "reward_description": ""}

    def test_setting_default(self, settings):
        settings.VOLTA = {"DEFAULT_STAMPS_REQUIRED": 6}

        assert LoyaltyCardRules.from_json({}).stamps_required == 6


class TestBusinessSettingsAndDesign:
    def test_business_settings_defaults(self):
        data = BusinessSettings.from_json(None)

        assert data.business_type == "restaurant"
        assert data.ai_tone == "amigável"

    def test_design_color_normalized(self):
        design = CardDesign.from_json({"background_color": "1A1A1A"})

        assert design.background_color == "#1A1A1A"
        assert design.foreground_color == "#FFFFFF"


# ═══════════════════════════════════════════════════════════════════
# Models
# ═══════════════════════════════════════════════════════════════════


@pytest.mark.django_db
class TestBusiness:
    def test_email_lowercased(self):
        business = Business.objects.create(name="Bar", email="  Dono@Bar.COM ")

        assert business.email == "dono@bar.com"

    def test_business_settings(self, business):
        assert business.business_settings.ai_tone == "amigável"


@pytest.mark.django_db
class TestCustomer:
    def test_phone_normalized(self, customer):
        assert customer.phone == "+5541999990001"

    def test_phone_unique_per_business(self, business, customer):
        with pytest.raises(IntegrityError):
            Customer.objects.create(business=business, name="Outra", phone="(41) 99999-0001")

    def test_same_phone_in_other_business(self, other_business, customer):
        other = Customer.objects.create(business=other_business, name="Maria", phone="41999990001")

        assert other.phone == customer.phone

    def test_first_name_and_consent(self, customer):
        assert customer.first_name == "Maria"
        assert customer.has_lgpd_consent is True


@pytest.mark.django_db
class TestEnrollment:
    def test_defaults(self, enrollment):
        assert enrollment.current_stamps == 0
        assert enrollment.status == "active"
        assert enrollment.total_redeemed == 0

    def test_progress(self, enrollment):
        enrollment.current_stamps = 4

        assert enrollment.stamps_required == 10
        assert enrollment.stamps_remaining == 6
        assert enrollment.progress_percent == 40

    def test_unique_per_card(self, customer, card, enrollment):
        with pytest.raises(IntegrityError):
            CustomerLoyaltyCard.objects.create(customer=customer, loyalty_card=card)

    def test_card_str(self, card):
        assert str(card) == "Café Fidelidade (10 selos)"

    def test_card_rules_fallback(self, business):
        card = LoyaltyCard.objects.create(business=business, name="Sem regras")

        assert card.card_rules.stamps_required == 10
