"""StampTransaction model — append-only log of stamp grants."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class StampTransactionType(models.TextChoices):
    MANUAL = "manual", _("Manual")
    QR_SCAN = "qr_scan", _("Leitura de QR")
    IMPORT = "import", _("Importação")
    RESET = "reset", _("Reinício")


class StampTransaction(models.Model):
    """
    Immutable record of stamps granted to an enrollment.

    ``stamps_added`` is what the merchant granted, not what was credited:
    surplus beyond the card's cap is still recorded here. Daily limits sum
    this column.
    """

    enrollment = models.ForeignKey(
        "volta.CustomerLoyaltyCard",
        on_delete=models.CASCADE,
        related_name="transactions",
        verbose_name=_("cartão do cliente"),
    )

    stamps_added = models.IntegerField(_("selos adicionados"))
    transaction_type = models.CharField(
        _("tipo"),
        max_length=20,
        choices=StampTransactionType.choices,
        default=StampTransactionType.MANUAL,
    )
    notes = models.CharField(_("observações"), max_length=255, blank=True)

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True, db_index=True)
    created_by = models.CharField(_("criado por"), max_length=255, blank=True)

    class Meta:
        verbose_name = _("transação de selos")
        verbose_name_plural = _("transações de selos")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["enrollment", "-created_at"], name="volta_stamptx_enroll_idx"),
        ]

    def __str__(self):
        return f"+{self.stamps_added} selo(s) — {self.get_transaction_type_display()}"
