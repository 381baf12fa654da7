"""
LGPD endpoint.

    POST wallet-data/   {customer_id, action: export|delete|anonymize, reason?, requested_by?}
"""

from __future__ import annotations

import logging

from django.http import JsonResponse

from volta.contrib.privacy.service import PrivacyService
from volta.views import BusinessView, parse_json

logger = logging.getLogger("volta.privacy")


class WalletDataView(BusinessView):
    logger = logger

    def post(self, request):
        business = self.get_business()
        data = parse_json(request)
        result = PrivacyService.wallet_data(
            business,
            data.get("customer_id"),
            data.get("action"),
            reason=data.get("reason") or "",
            requested_by=data.get("requested_by") or self.get_actor(),
        )
        return JsonResponse(result)
