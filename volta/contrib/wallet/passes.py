"""
Wallet pass building blocks - templates, field sets, provider error mapping.

Nothing here touches the database; WalletService and the LGPD tooling
both build on it.
"""

import logging
from datetime import timedelta

from django.utils import timezone

from volta.exceptions import WalletPassError
from volta.rules import CardDesign, LoyaltyCardRules

logger = logging.getLogger(__name__)

COMPLETED_STATUS_TEXT = "Recompensa Disponível! 🎉"
DEFAULT_VALIDITY_YEARS = 2


def safe_wallet_operation(operation, operation_name: str):
    """
    Run a provider call, mapping failures to WalletPassError.

    A provider error carrying ``code`` GRPC_ERROR becomes SERVICE_UNAVAILABLE,
    INVALID_ARGUMENT stays INVALID_ARGUMENT, anything else OPERATION_FAILED.
    WalletPassError raised by the backend passes through unchanged.
    """
    try:
        return operation()
    except WalletPassError:
        raise
    except Exception as exc:
        logger.error("Wallet %s error: %s", operation_name, exc)
        code = getattr(exc, "code", None)
        details = getattr(exc, "details", None) or {"error": str(exc)}
        if code == "GRPC_ERROR":
            raise WalletPassError(
                "SERVICE_UNAVAILABLE",
                f"Wallet pass service unavailable for {operation_name}",
                details=details,
            ) from exc
        if code == "INVALID_ARGUMENT":
            raise WalletPassError(
                "INVALID_ARGUMENT",
                f"Invalid data provided for {operation_name}",
                details=details,
            ) from exc
        raise WalletPassError(
            "OPERATION_FAILED",
            f"Wallet {operation_name} failed",
            details=details,
        ) from exc


def format_date_br(value) -> str:
    return value.strftime("%d/%m/%Y")


def expiry_date(expiry_days: int | None = None, today=None) -> str:
    """Pass validity: ``expiry_days`` from today, or two years when unset."""
    today = today or timezone.localdate()
    if not expiry_days:
        try:
            end = today.replace(year=today.year + DEFAULT_VALIDITY_YEARS)
        except ValueError:
            # 29/02 -> 28/02
            end = today.replace(year=today.year + DEFAULT_VALIDITY_YEARS, day=28)
        return format_date_br(end)
    return format_date_br(today + timedelta(days=expiry_days))


def balance_field(current: int, required: int) -> dict:
    return {"value": f"{current}/{required}", "label": "Selos Coletados"}


def initial_fields(rules: LoyaltyCardRules) -> dict:
    """Fields of a newly issued pass."""
    return {
        "balance": {"value": f"0/{rules.stamps_required}"},
        "reward": {"value": rules.reward_description, "label": "Recompensa"},
    }


def stamp_fields(current: int, required: int, completed: bool = False) -> dict:
    """Fields pushed to a pass after a stamp grant."""
    fields = {"balance": balance_field(current, required)}
    if completed:
        fields["status"] = {"value": COMPLETED_STATUS_TEXT, "label": "Status"}
    return fields


def build_template(card, business=None, today=None) -> dict:
    """
    Pass template for a loyalty card.

    Colors come from the card design (#8B4513 / #FFFFFF / #FFFFFF by
    default), the barcode is a QR code with the pass serial.
    """
    design: CardDesign = card.card_design
    rules: LoyaltyCardRules = card.card_rules
    return {
        "id": f"template-{card.pk}",
        "name": card.name,
        "description": card.description,
        "organization": business.name if business is not None else "",
        "fields": {
            "balance": {"label": "Selos Coletados", "value": f"0/{rules.stamps_required}"},
            "reward": {"label": "Recompensa", "value": rules.reward_description},
            "expires": {"label": "Válido até", "value": expiry_date(rules.expiry_days, today=today)},
        },
        "barcode": {
            "format": "QR",
            "message": "{serial}",
            "altText": "Código: {serial}",
        },
        "design": {
            "backgroundColor": design.background_color,
            "foregroundColor": design.foreground_color,
            "labelColor": design.label_color,
        },
    }
