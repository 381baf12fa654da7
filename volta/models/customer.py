"""Customer model.

A customer belongs to exactly one business. The same person enrolling in
two restaurants is two Customer rows; (business, phone) is unique.
"""

import uuid as uuid_lib

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Customer(models.Model):
    """
    Registered restaurant customer.

    ``consent`` holds the LGPD consent captured on the enrollment form
    (lgpd_accepted, marketing, consent_date). ``custom_fields`` holds the
    answers to the card's custom enrollment form.
    """

    id = models.UUIDField(primary_key=True, default=uuid_lib.uuid4, editable=False)

    business = models.ForeignKey(
        "volta.Business",
        on_delete=models.CASCADE,
        related_name="customers",
        verbose_name=_("estabelecimento"),
    )

    name = models.CharField(_("nome"), max_length=200)
    phone = models.CharField(_("telefone"), max_length=20, db_index=True)
    email = models.EmailField(_("email"), blank=True)

    custom_fields = models.JSONField(_("campos personalizados"), default=dict, blank=True)
    tags = models.JSONField(_("tags"), default=list, blank=True)
    consent = models.JSONField(_("consentimento"), default=dict, blank=True)

    # Visit stats
    enrollment_date = models.DateTimeField(_("data de inscrição"), default=timezone.now)
    total_visits = models.IntegerField(_("total de visitas"), default=0)
    total_spent = models.DecimalField(
        _("total gasto"),
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
    )
    last_visit = models.DateTimeField(_("última visita"), null=True, blank=True)

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True)
    updated_at = models.DateTimeField(_("atualizado em"), auto_now=True)

    class Meta:
        verbose_name = _("cliente")
        verbose_name_plural = _("clientes")
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["business", "phone"],
                name="volta_unique_customer_phone_per_business",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.phone})"

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else ""

    @property
    def has_lgpd_consent(self) -> bool:
        return bool((self.consent or {}).get("lgpd_accepted"))

    def save(self, *args, **kwargs):
        if self.phone:
            from volta.utils import normalize_phone

            self.phone = normalize_phone(self.phone)

        if self.email:
            self.email = self.email.lower().strip()

        super().save(*args, **kwargs)
