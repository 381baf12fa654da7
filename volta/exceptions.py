"""Volta exceptions."""


class BaseError(Exception):
    """
    Structured exception with a machine-readable code.

    Subclasses declare ``_default_messages`` (code -> message). Extra keyword
    arguments are kept in ``data`` for logging and API responses.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}


class VoltaError(BaseError):
    """
    Structured exception for loyalty operations.

    Usage:
        try:
            result = StampService.add_stamps(business, "cust-uuid", 2)
        except VoltaError as e:
            return JsonResponse({"error": e.message}, status=e.http_status)
    """

    _default_messages = {
        "INVALID_REQUEST": "Invalid request body",
        "INVALID_STAMPS": "stamps must be a positive integer",
        "CUSTOMER_REQUIRED": "customer_id is required",
        "CARD_SELECTION_AMBIGUOUS": "Multiple cards found. Please specify loyalty_card_id",
        "DAILY_LIMIT_REACHED": "Daily stamp limit reached",
        "AUTHENTICATION_REQUIRED": "Authentication required",
        "BUSINESS_NOT_FOUND": "Business not found for user",
        "CUSTOMER_NOT_FOUND": "Customer not found or access denied",
        "CARD_NOT_FOUND": "Loyalty card not found or inactive",
        "ENROLLMENT_NOT_FOUND": "Customer has no loyalty cards for this business",
        "TENANT_MISMATCH": "Customer and loyalty card do not belong to the same business",
        "CONSENT_REQUIRED": "LGPD consent required for wallet integration",
        "LGPD_COMPLIANCE_FAILED": "LGPD compliance error",
        "WALLET_DISABLED": "Wallet integration not enabled for loyalty card",
        "PASS_NOT_FOUND": "No wallet pass found for this loyalty card",
        "PERSISTENCE_FAILED": "Failed to update customer card",
    }

    _http_status = {
        "AUTHENTICATION_REQUIRED": 401,
        "TENANT_MISMATCH": 403,
        "BUSINESS_NOT_FOUND": 404,
        "CUSTOMER_NOT_FOUND": 404,
        "CARD_NOT_FOUND": 404,
        "ENROLLMENT_NOT_FOUND": 404,
        "PASS_NOT_FOUND": 404,
        "PERSISTENCE_FAILED": 500,
    }

    @property
    def http_status(self) -> int:
        """HTTP status for the error code (400 unless mapped otherwise)."""
        return self._http_status.get(self.code, 400)


class WalletPassError(BaseError):
    """
    Wallet pass provider failure.

    Raised by wallet backends (or mapped from provider exceptions by
    ``volta.contrib.wallet.service.safe_wallet_operation``).
    """

    _default_messages = {
        "SERVICE_UNAVAILABLE": "Wallet pass service unavailable",
        "INVALID_ARGUMENT": "Invalid data provided to wallet pass service",
        "OPERATION_FAILED": "Wallet pass operation failed",
    }
