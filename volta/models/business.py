"""Business model — the tenant. Every other record is scoped to one."""

import uuid as uuid_lib

from django.db import models
from django.utils.translation import gettext_lazy as _

from volta.rules import BusinessSettings


class Business(models.Model):
    """
    A merchant account (restaurant, café, bakery).

    The owner logs in with ``email``; request handlers resolve the tenant
    from the authenticated user's email (see services.business).
    """

    id = models.UUIDField(primary_key=True, default=uuid_lib.uuid4, editable=False)

    name = models.CharField(_("nome"), max_length=200)
    email = models.EmailField(_("email"), unique=True)
    phone = models.CharField(_("telefone"), max_length=20, blank=True)
    address = models.CharField(_("endereço"), max_length=255, blank=True)
    logo_url = models.URLField(_("logo"), blank=True)

    settings = models.JSONField(
        _("configurações"),
        default=dict,
        blank=True,
        help_text=_("business_type, ai_tone, brand_voice"),
    )

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True)

    class Meta:
        verbose_name = _("estabelecimento")
        verbose_name_plural = _("estabelecimentos")
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def business_settings(self) -> BusinessSettings:
        """Typed settings with defaults applied."""
        return BusinessSettings.from_json(self.settings)

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.lower().strip()
        super().save(*args, **kwargs)
