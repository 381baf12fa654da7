"""
Wallet pass endpoints.

    POST create-pass/                 issue a pass {customer_id, loyalty_card_id}
    POST update-pass/                 push the balance {customer_loyalty_card_id}
    POST delete-pass/                 delete a pass {customer_loyalty_card_id}
    GET  retry-queue/                 queue stats
    POST retry-queue/                 {action: clear|retry, queue_item_id?}
    GET  pass/<customer_card_id>/     public pass preview
"""

from __future__ import annotations

import logging

from django.http import JsonResponse
from django.utils import timezone

from volta.contrib.wallet.passes import build_template
from volta.contrib.wallet.retry import RetryQueue
from volta.contrib.wallet.service import WalletService
from volta.exceptions import VoltaError
from volta.models import CustomerLoyaltyCard
from volta.services import customer as customer_service
from volta.views import BusinessView, VoltaView, parse_json

logger = logging.getLogger("volta.wallet")


def _pass_data(enrollment: CustomerLoyaltyCard) -> dict:
    return {
        "customer_loyalty_card_id": str(enrollment.pk),
        "passkit_id": enrollment.passkit_id,
        "wallet_pass_url": enrollment.wallet_pass_url,
        "google_pay_url": enrollment.google_pay_url,
        "qr_code": enrollment.qr_code,
    }


class CreatePassView(BusinessView):
    logger = logger

    def post(self, request):
        business = self.get_business()
        data = parse_json(request)
        customer_id = data.get("customer_id")
        loyalty_card_id = data.get("loyalty_card_id")
        if not customer_id:
            raise VoltaError("INVALID_REQUEST", message="customer_id is required")
        if not loyalty_card_id:
            raise VoltaError("INVALID_REQUEST", message="loyalty_card_id is required")

        enrollment = WalletService.create_pass(customer_id, loyalty_card_id, business=business)
        return JsonResponse({"success": True, "data": _pass_data(enrollment)})


class _EnrollmentPassView(BusinessView):
    logger = logger

    def get_enrollment(self, business, data) -> CustomerLoyaltyCard:
        enrollment_id = data.get("customer_loyalty_card_id")
        if not enrollment_id:
            raise VoltaError("INVALID_REQUEST", message="customer_loyalty_card_id is required")
        enrollment = customer_service.get_enrollment_for_business(business, enrollment_id)
        if not enrollment.loyalty_card.wallet_enabled:
            raise VoltaError("WALLET_DISABLED")
        if not enrollment.passkit_id:
            raise VoltaError("PASS_NOT_FOUND")
        return enrollment


class UpdatePassView(_EnrollmentPassView):
    def post(self, request):
        business = self.get_business()
        enrollment = self.get_enrollment(business, parse_json(request))
        WalletService.update_pass_stamps(enrollment)
        return JsonResponse({
            "success": True,
            "data": {
                "customer_loyalty_card_id": str(enrollment.pk),
                "current_stamps": enrollment.current_stamps,
                "stamps_required": enrollment.stamps_required,
                "status": enrollment.status,
            },
        })


class DeletePassView(_EnrollmentPassView):
    def post(self, request):
        business = self.get_business()
        enrollment = self.get_enrollment(business, parse_json(request))
        WalletService.delete_pass(enrollment)
        return JsonResponse({
            "success": True,
            "message": "Wallet pass deleted",
            "data": {"customer_loyalty_card_id": str(enrollment.pk)},
        })


class RetryQueueView(BusinessView):
    logger = logger

    def get(self, request):
        self.get_business()
        stats = RetryQueue.stats()
        if stats["total"] == 0:
            message = "No items in retry queue"
        else:
            message = (
                f"{stats['total']} items in queue, {stats['pending']} pending, "
                f"{stats['failed']} failed"
            )
        return JsonResponse({
            "success": True,
            "data": {
                "queue_stats": stats,
                "status": RetryQueue.queue_status(stats),
                "message": message,
                "timestamp": timezone.now().isoformat(),
            },
        })

    def post(self, request):
        self.get_business()
        data = parse_json(request)
        action = data.get("action")

        if action == "clear":
            removed = RetryQueue.clear()
            return JsonResponse({
                "success": True,
                "data": {"message": "Retry queue cleared successfully", "removed": removed},
            })

        if action == "retry":
            item_id = data.get("queue_item_id")
            if not item_id:
                raise VoltaError("INVALID_REQUEST", message="queue_item_id is required for retry action")
            try:
                item_id = int(item_id)
            except (TypeError, ValueError):
                raise VoltaError("INVALID_REQUEST", message="queue_item_id must be an integer") from None
            ok = RetryQueue.retry(item_id)
            return JsonResponse({
                "success": ok,
                "data": {
                    "queue_item_id": item_id,
                    "message": "Manual retry successful" if ok else "Manual retry failed",
                },
            })

        raise VoltaError("INVALID_REQUEST", message='Invalid action. Use "clear" or "retry"')


class PassPreviewView(VoltaView):
    """Public preview of a customer's pass (linked from the enrollment page)."""

    logger = logger

    def get(self, request, customer_card_id):
        enrollment = (
            CustomerLoyaltyCard.objects
            .select_related("customer", "loyalty_card__business")
            .filter(pk=customer_card_id)
            .first()
        )
        if enrollment is None:
            raise VoltaError("ENROLLMENT_NOT_FOUND", message="Customer card not found")

        card = enrollment.loyalty_card
        business = card.business
        return JsonResponse({
            "customer_card_id": str(enrollment.pk),
            "business": {"name": business.name, "logo_url": business.logo_url},
            "card": {"name": card.name, "description": card.description},
            "customer_name": enrollment.customer.first_name,
            "balance": f"{enrollment.current_stamps}/{enrollment.stamps_required}",
            "status": enrollment.status,
            "qr_code": enrollment.qr_code,
            "wallet_pass_url": enrollment.wallet_pass_url,
            "google_pay_url": enrollment.google_pay_url,
            "template": build_template(card, business),
        })
