"""Campaign model — marketing messages (WhatsApp) sent to customers."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class CampaignType(models.TextChoices):
    MANUAL = "manual", _("Manual")
    AI_GENERATED = "ai_generated", _("Gerada por IA")


class CampaignStatus(models.TextChoices):
    DRAFT = "draft", _("Rascunho")
    ACTIVE = "active", _("Ativa")
    PAUSED = "paused", _("Pausada")
    COMPLETED = "completed", _("Concluída")


class Campaign(models.Model):
    """Marketing campaign. ``content`` holds title/message/expected_results."""

    business = models.ForeignKey(
        "volta.Business",
        on_delete=models.CASCADE,
        related_name="campaigns",
        verbose_name=_("estabelecimento"),
    )

    name = models.CharField(_("nome"), max_length=200)
    type = models.CharField(
        _("tipo"),
        max_length=20,
        choices=CampaignType.choices,
        default=CampaignType.MANUAL,
    )
    content = models.JSONField(_("conteúdo"), default=dict, blank=True)
    target_audience = models.JSONField(_("público-alvo"), default=dict, blank=True)
    status = models.CharField(
        _("status"),
        max_length=20,
        choices=CampaignStatus.choices,
        default=CampaignStatus.DRAFT,
    )

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True)

    class Meta:
        verbose_name = _("campanha")
        verbose_name_plural = _("campanhas")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} ({self.get_status_display()})"
