"""Volta models (CORE only).

CORE models are exported here. Contrib models are in their respective modules:
- volta.contrib.wallet: WalletRetryItem
- volta.contrib.privacy: PrivacyAuditLog
"""

from volta.models.business import Business
from volta.models.customer import Customer
from volta.models.loyalty_card import LoyaltyCard
from volta.models.enrollment import CustomerLoyaltyCard, EnrollmentStatusChoices
from volta.models.stamp_transaction import StampTransaction, StampTransactionType
from volta.models.campaign import Campaign, CampaignStatus, CampaignType

__all__ = [
    # Tenant
    "Business",
    # Customers and cards
    "Customer",
    "LoyaltyCard",
    "CustomerLoyaltyCard",
    "EnrollmentStatusChoices",
    # Stamp log
    "StampTransaction",
    "StampTransactionType",
    # Marketing
    "Campaign",
    "CampaignStatus",
    "CampaignType",
]
