"""
Volta JSON endpoints.

    POST stamps/add/               grant stamps (dashboard / QR scan)
    GET  stamps/history/           recent stamp transactions
    POST stamps/reset/             start a new cycle on a completed card
    POST customers/assign-card/    assign a card to an existing customer
    POST enroll/                   public enrollment form (no login)

Dashboard endpoints resolve the tenant from the logged-in user's email.
Errors are returned as {"error": ..., "details"?: ...} with the status of
the VoltaError code.
"""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from volta.exceptions import VoltaError, WalletPassError
from volta.models import StampTransactionType
from volta.services import business as business_service
from volta.services import customer as customer_service
from volta.services.stamps import MANUAL_STAMP_NOTE, StampService

logger = logging.getLogger("volta.stamps")


def parse_json(request) -> dict:
    """Request body as a dict. Raises VoltaError(INVALID_REQUEST)."""
    try:
        data = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError):
        raise VoltaError("INVALID_REQUEST")
    if not isinstance(data, dict):
        raise VoltaError("INVALID_REQUEST")
    return data


def error_response(exc: VoltaError) -> JsonResponse:
    body = {"error": exc.message}
    details = exc.data.get("details")
    if details is not None:
        body["details"] = details
    return JsonResponse(body, status=exc.http_status)


@method_decorator(csrf_exempt, name="dispatch")
class VoltaView(View):
    """
    Base JSON view.

    VoltaError becomes a structured error response, WalletPassError a 500
    with the provider message, anything else a logged 500.
    """

    logger = logger

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except VoltaError as exc:
            if exc.http_status >= 500:
                self.logger.error("%s: %s", self.__class__.__name__, exc)
            return error_response(exc)
        except WalletPassError as exc:
            self.logger.error("%s: wallet error %s", self.__class__.__name__, exc)
            return JsonResponse(
                {"success": False, "error": exc.message, "details": exc.data.get("details")},
                status=500,
            )
        except Exception:
            self.logger.exception("%s failed", self.__class__.__name__)
            return JsonResponse({"error": "Internal server error"}, status=500)


class BusinessView(VoltaView):
    """View for the logged-in business owner."""

    def get_business(self):
        return business_service.get_for_user(getattr(self.request, "user", None))

    def get_actor(self) -> str:
        user = getattr(self.request, "user", None)
        return getattr(user, "email", "") or "system"


class AddStampsView(BusinessView):
    """
    POST {customer_id, loyalty_card_id?, stamps}.

    Returns {ok, current_stamps, status, total_redeemed}.
    """

    ALLOWED_TYPES = {
        StampTransactionType.MANUAL: MANUAL_STAMP_NOTE,
        StampTransactionType.QR_SCAN: "Selo adicionado via QR code",
    }

    def post(self, request):
        business = self.get_business()
        data = parse_json(request)

        transaction_type = data.get("transaction_type") or StampTransactionType.MANUAL
        if transaction_type not in self.ALLOWED_TYPES:
            raise VoltaError("INVALID_REQUEST", message="transaction_type must be manual or qr_scan")

        result = StampService.add_stamps(
            business,
            data.get("customer_id"),
            data.get("stamps"),
            loyalty_card_id=data.get("loyalty_card_id") or None,
            transaction_type=transaction_type,
            notes=self.ALLOWED_TYPES[transaction_type],
            created_by=self.get_actor(),
        )
        return JsonResponse(result.as_response())


class StampHistoryView(BusinessView):
    """GET ?customer_id=&limit= — most recent first."""

    def get(self, request):
        business = self.get_business()
        try:
            limit = min(max(int(request.GET.get("limit", 50)), 1), 500)
        except ValueError:
            raise VoltaError("INVALID_REQUEST", message="limit must be an integer")

        transactions = StampService.history(
            business,
            limit=limit,
            customer_id=request.GET.get("customer_id") or None,
        )
        return JsonResponse({
            "transactions": [
                {
                    "id": t.pk,
                    "customer_id": str(t.enrollment.customer_id),
                    "customer_name": t.enrollment.customer.name,
                    "loyalty_card_id": str(t.enrollment.loyalty_card_id),
                    "loyalty_card_name": t.enrollment.loyalty_card.name,
                    "stamps_added": t.stamps_added,
                    "transaction_type": t.transaction_type,
                    "notes": t.notes,
                    "created_at": t.created_at.isoformat(),
                }
                for t in transactions
            ]
        })


class ResetEnrollmentView(BusinessView):
    """POST {enrollment_id}."""

    def post(self, request):
        business = self.get_business()
        data = parse_json(request)
        enrollment = StampService.reset_enrollment(
            business,
            data.get("enrollment_id"),
            created_by=self.get_actor(),
        )
        return JsonResponse({
            "ok": True,
            "current_stamps": enrollment.current_stamps,
            "status": enrollment.status,
            "total_redeemed": enrollment.total_redeemed,
        })


class AssignCardView(BusinessView):
    """POST {customer_id, loyalty_card_id}."""

    def post(self, request):
        business = self.get_business()
        data = parse_json(request)
        enrollment = customer_service.assign_card(
            data.get("customer_id"),
            data.get("loyalty_card_id"),
            business=business,
        )
        return JsonResponse({
            "success": True,
            "message": f"Card assigned to {enrollment.customer.name}",
            "customer_card_id": str(enrollment.pk),
        })


class EnrollView(VoltaView):
    """
    Public enrollment form.

    POST {card_id, name, phone, email?, custom_fields?, consent?}
    """

    def post(self, request):
        data = parse_json(request)
        phone = str(data.get("phone") or "")
        logger.info("Enrollment request: card=%s phone=%sXXX", data.get("card_id"), phone[:5])

        customer, enrollment, created = customer_service.enroll(
            data.get("card_id"),
            data.get("name"),
            phone,
            email=data.get("email") or "",
            custom_fields=data.get("custom_fields") or {},
            consent=data.get("consent") or {},
        )
        return JsonResponse({
            "success": True,
            "message": "Enrollment successful",
            "customer_id": str(customer.pk),
            "customer_card_id": str(enrollment.pk),
            "created": created,
        })
