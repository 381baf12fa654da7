"""LoyaltyCard model — a stamp card program offered by a business."""

import uuid as uuid_lib

from django.db import models
from django.utils.translation import gettext_lazy as _

from volta.rules import CardDesign, LoyaltyCardRules


class LoyaltyCard(models.Model):
    """
    Stamp card definition (e.g. "Café Fidelidade: 10 selos = 1 café").

    ``rules`` is read through ``card_rules`` (LoyaltyCardRules), never as a
    raw dict.
    """

    id = models.UUIDField(primary_key=True, default=uuid_lib.uuid4, editable=False)

    business = models.ForeignKey(
        "volta.Business",
        on_delete=models.CASCADE,
        related_name="loyalty_cards",
        verbose_name=_("estabelecimento"),
    )

    name = models.CharField(_("nome"), max_length=200)
    description = models.TextField(_("descrição"), blank=True)

    design = models.JSONField(_("design"), default=dict, blank=True)
    rules = models.JSONField(
        _("regras"),
        default=dict,
        blank=True,
        help_text=_("stamps_required, reward_description, max_stamps_per_day, expiry_days"),
    )
    enrollment_form = models.JSONField(_("formulário de inscrição"), default=dict, blank=True)

    is_active = models.BooleanField(_("ativo"), default=True, db_index=True)
    wallet_enabled = models.BooleanField(_("carteira digital"), default=False)

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True)

    class Meta:
        verbose_name = _("cartão fidelidade")
        verbose_name_plural = _("cartões fidelidade")
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.card_rules.stamps_required} selos)"

    @property
    def card_rules(self) -> LoyaltyCardRules:
        """Typed rules with defaults applied."""
        return LoyaltyCardRules.from_json(self.rules)

    @property
    def card_design(self) -> CardDesign:
        return CardDesign.from_json(self.design)
