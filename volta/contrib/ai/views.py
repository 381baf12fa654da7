"""
AI endpoints.

    POST campaign/   {campaign_type, target_audience, custom_prompt?, save?}
    POST insights/
"""

from __future__ import annotations

import logging

from django.http import JsonResponse

from volta.contrib.ai.analysis import build_business_context
from volta.contrib.ai.service import AIService
from volta.exceptions import VoltaError
from volta.views import BusinessView, parse_json

logger = logging.getLogger("volta.ai")


class CampaignView(BusinessView):
    logger = logger

    def post(self, request):
        business = self.get_business()
        data = parse_json(request)
        campaign_type = data.get("campaign_type")
        target_audience = data.get("target_audience")
        if not campaign_type or not target_audience:
            raise VoltaError("INVALID_REQUEST", message="Missing required parameters")

        context = build_business_context(business)
        result = AIService.generate_campaign(
            context,
            campaign_type,
            target_audience,
            custom_prompt=data.get("custom_prompt") or None,
        )

        body = {**result.value.as_json(), "is_fallback": result.is_fallback}
        if data.get("save"):
            campaign = AIService.save_campaign(business, result.value, campaign_type, target_audience)
            body["campaign_id"] = campaign.pk
        return JsonResponse(body)


class InsightsView(BusinessView):
    logger = logger

    def post(self, request):
        business = self.get_business()
        context = build_business_context(business)
        result = AIService.generate_insights(business, context=context)
        return JsonResponse({
            "insights": result.value,
            "business_context": context.as_json(),
            "is_fallback": result.is_fallback,
        })
