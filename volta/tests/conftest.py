"""Pytest fixtures for Volta tests."""

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone

from volta.models import Business, Customer, CustomerLoyaltyCard, LoyaltyCard


@pytest.fixture
def business(db):
    """Create the test restaurant (tenant)."""
    return Business.objects.create(
        name="Cantina da Nonna",
        email="dono@cantina.com.br",
        phone="+5541999990000",
        settings={"business_type": "restaurant", "ai_tone": "amigável"},
    )


@pytest.fixture
def other_business(db):
    """Create a second tenant."""
    return Business.objects.create(name="Padaria Central", email="contato@padaria.com.br")


@pytest.fixture
def user(db, business):
    """Django user that owns ``business`` (same email)."""
    return get_user_model().objects.create_user(
        username="dono",
        email=business.email,
        password="secret",
    )


@pytest.fixture
def card(db, business):
    """10-stamp card."""
    return LoyaltyCard.objects.create(
        business=business,
        name="Café Fidelidade",
        rules={"stamps_required": 10, "reward_description": "1 café grátis"},
    )


@pytest.fixture
def wallet_card(db, business):
    """Card with wallet passes enabled."""
    return LoyaltyCard.objects.create(
        business=business,
        name="Pizza Club",
        rules={"stamps_required": 8, "reward_description": "1 pizza grande"},
        design={"background_color": "1A1A1A"},
        wallet_enabled=True,
    )


@pytest.fixture
def customer(db, business):
    """Customer with LGPD consent."""
    return Customer.objects.create(
        business=business,
        name="Maria Silva",
        phone="41999990001",
        email="maria@example.com",
        consent={
            "lgpd_accepted": True,
            "marketing": True,
            "consent_date": timezone.now().isoformat(),
        },
    )


@pytest.fixture
def enrollment(db, customer, card):
    """Maria enrolled in the 10-stamp card."""
    return CustomerLoyaltyCard.objects.create(customer=customer, loyalty_card=card)
