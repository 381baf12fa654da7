"""
Django Volta - Loyalty stamp cards for restaurants.

Usage:
    from volta import StampService
    from volta.gates import Gates, GateError, GateResult

    result = StampService.add_stamps(business, customer_id, 2)
    result.as_response()  # {"ok": True, "current_stamps": 2, ...}

    # Gates validation
    Gates.stamp_amount(3)
    Gates.tenant_isolation(customer.business_id, card.business_id)
"""


def __getattr__(name):
    if name == "StampService":
        from volta.services.stamps import StampService

        return StampService
    if name == "Gates":
        from volta.gates import Gates

        return Gates
    if name == "GateError":
        from volta.gates import GateError

        return GateError
    if name == "GateResult":
        from volta.gates import GateResult

        return GateResult
    if name == "apply_stamps":
        from volta.accrual import apply_stamps

        return apply_stamps
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["StampService", "Gates", "GateError", "GateResult", "apply_stamps"]
__version__ = "0.3.0"
