"""AI service — campaign copy and customer insights."""

import logging

from volta.conf import load_backend
from volta.contrib.ai.analysis import analyze_customers, build_business_context, fallback_insights
from volta.contrib.ai.content import BusinessContext, CampaignContent, Fallback, Generated
from volta.contrib.ai.prompts import (
    CAMPAIGN_SYSTEM,
    INSIGHTS_SYSTEM,
    MAX_INSIGHTS,
    campaign_prompt,
    extract_json,
    insights_prompt,
)
from volta.models import Business, Campaign, CampaignStatus, CampaignType
from volta.protocols.completion import CompletionBackend

logger = logging.getLogger(__name__)

DEFAULT_EXPECTED_RESULTS = "Engajamento estimado de 20-25%"


def _get_completion_backend(backend: CompletionBackend | None = None) -> CompletionBackend | None:
    """Get the given backend or the configured AI_BACKEND."""
    return backend or load_backend("AI_BACKEND")


def _backend_available(backend: CompletionBackend | None) -> bool:
    return backend is not None and bool(getattr(backend, "available", True))


class AIService:
    """
    Service for AI generation.

    Uses @classmethod for extensibility (consistent with other contrib services).
    Results are Generated (model output) or Fallback (canned content).
    """

    @classmethod
    def generate_campaign(
        cls,
        context: BusinessContext,
        campaign_type: str,
        target_audience: str,
        custom_prompt: str | None = None,
        backend: CompletionBackend | None = None,
    ) -> Generated[CampaignContent] | Fallback[CampaignContent]:
        """
        Write a WhatsApp campaign.

        Args:
            context: Business context (see analysis.build_business_context)
            campaign_type: e.g. "reativacao", "aniversario"
            target_audience: Audience description
            custom_prompt: Replaces the default prompt
            backend: Completion backend (defaults to VOLTA["AI_BACKEND"])
        """
        backend = _get_completion_backend(backend)
        if not _backend_available(backend):
            logger.warning("AI backend not configured, using fallback campaign content")
            return Fallback(
                CampaignContent(
                    title=f"Campanha {campaign_type}",
                    message=(
                        f"Olá! Temos uma oferta especial para você no "
                        f"{context.business_name} 😊 Venha nos visitar!"
                    ),
                    expected_results=DEFAULT_EXPECTED_RESULTS,
                ),
                reason="backend_unavailable",
            )

        try:
            reply = backend.complete(
                CAMPAIGN_SYSTEM,
                custom_prompt or campaign_prompt(context, campaign_type, target_audience),
                temperature=0.8,
                max_tokens=800,
            )
            return Generated(CampaignContent.from_json(extract_json(reply)))
        except Exception as exc:
            logger.warning("Campaign generation failed: %s", exc)
            return Fallback(cls._miss_you_campaign(context, campaign_type), reason=str(exc))

    @classmethod
    def generate_insights(
        cls,
        business: Business,
        context: BusinessContext | None = None,
        backend: CompletionBackend | None = None,
        now=None,
    ) -> Generated[list[dict]] | Fallback[list[dict]]:
        """
        Up to four actionable insights about the business's customers.

        Falls back to rule-based insights from the customer segments.
        """
        context = context or build_business_context(business, now=now)
        customers = business.customers.prefetch_related("enrollments__loyalty_card")
        analysis = analyze_customers(customers, now=now)

        backend = _get_completion_backend(backend)
        if not _backend_available(backend):
            logger.warning("AI backend not configured, using fallback insights")
            return Fallback(fallback_insights(analysis, context), reason="backend_unavailable")

        try:
            reply = backend.complete(
                INSIGHTS_SYSTEM,
                insights_prompt(context, analysis),
                temperature=0.7,
                max_tokens=2000,
            )
            data = extract_json(reply, array=True)
            if not isinstance(data, list):
                raise ValueError("Insights reply is not a JSON array")
            insights = [item for item in data if isinstance(item, dict)][:MAX_INSIGHTS]
            return Generated(insights)
        except Exception as exc:
            logger.warning("Insights generation failed: %s", exc)
            return Fallback(fallback_insights(analysis, context), reason=str(exc))

    @classmethod
    def save_campaign(
        cls,
        business: Business,
        content: CampaignContent,
        campaign_type: str,
        target_audience: str,
        name: str | None = None,
    ) -> Campaign:
        """Store generated content as a draft campaign."""
        campaign = Campaign.objects.create(
            business=business,
            name=name or content.title,
            type=CampaignType.AI_GENERATED,
            status=CampaignStatus.DRAFT,
            content=content.as_json(),
            target_audience={"campaign_type": campaign_type, "description": target_audience},
        )
        logger.info("Campaign saved: %s (business %s)", campaign.pk, business.pk)
        return campaign

    @classmethod
    def _miss_you_campaign(cls, context: BusinessContext, campaign_type: str) -> CampaignContent:
        return CampaignContent(
            title=f"Campanha {campaign_type}",
            message=(
                f"Olá! Sentimos sua falta no {context.business_name} 😊 "
                "Volte e ganhe um desconto especial!"
            ),
            expected_results=DEFAULT_EXPECTED_RESULTS,
        )
