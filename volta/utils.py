"""Volta utilities — phone and email normalization."""

import re

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_phone(phone: str, region_prefix: str | None = None) -> str:
    """
    Normalize a Brazilian phone number to +55XXXXXXXXXXX.

    Non-digits are stripped. Local numbers (up to 11 digits) always get the
    region prefix, even when the area code equals it. Longer numbers are
    taken as already carrying the country code. Returns "" for empty input.

    Examples:
        "(41) 99999-0001"  -> "+5541999990001"
        "+55 41 99999 0001" -> "+5541999990001"
        "(55) 99999-0001"  -> "+5555999990001"
    """
    digits = "".join(filter(str.isdigit, str(phone or "")))
    if not digits:
        return ""
    if region_prefix is None:
        from volta.conf import volta_settings

        region_prefix = volta_settings.DEFAULT_REGION_PREFIX
    if len(digits) <= 11:
        digits = region_prefix + digits
    return "+" + digits


def validate_phone(phone: str) -> tuple[bool, str, str]:
    """
    Validate and normalize a phone number.

    Returns:
        (valid, normalized, error_message)
    """
    if not phone:
        return False, "", "Telefone é obrigatório"
    digits = "".join(filter(str.isdigit, str(phone)))
    if len(digits) < 10 or len(digits) > 13:
        return False, str(phone), "Telefone deve ter entre 10 e 13 dígitos"
    return True, normalize_phone(digits), ""


def is_valid_email(email: str) -> bool:
    """Empty emails are valid (email is optional)."""
    if not email:
        return True
    return bool(_EMAIL_RE.match(email))
