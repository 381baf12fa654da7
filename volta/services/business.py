"""Business service - tenant resolution for authenticated requests."""

from volta.exceptions import VoltaError
from volta.models import Business


def get_for_email(email: str) -> Business:
    """
    Resolve the business owned by a login email.

    Raises:
        VoltaError: BUSINESS_NOT_FOUND if email is empty or unknown
    """
    if not email:
        raise VoltaError("BUSINESS_NOT_FOUND", message="User email is required")
    try:
        return Business.objects.get(email__iexact=email.strip())
    except Business.DoesNotExist:
        raise VoltaError(
            "BUSINESS_NOT_FOUND",
            details=f"Business not found for email: {email}",
        )


def get_for_user(user) -> Business:
    """
    Resolve the business of a Django user.

    Raises:
        VoltaError: AUTHENTICATION_REQUIRED or BUSINESS_NOT_FOUND
    """
    if user is None or not user.is_authenticated:
        raise VoltaError("AUTHENTICATION_REQUIRED")
    return get_for_email(user.email)
