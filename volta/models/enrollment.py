"""CustomerLoyaltyCard model — a customer's progress on one loyalty card."""

import uuid as uuid_lib

from django.db import models
from django.utils.translation import gettext_lazy as _

from volta.accrual import EnrollmentState, EnrollmentStatus


class EnrollmentStatusChoices(models.TextChoices):
    ACTIVE = EnrollmentStatus.ACTIVE, _("Ativo")
    COMPLETED = EnrollmentStatus.COMPLETED, _("Completo")
    EXPIRED = EnrollmentStatus.EXPIRED, _("Expirado")


class CustomerLoyaltyCard(models.Model):
    """
    Enrollment of a customer in a loyalty card.

    Created once with 0 stamps / active / 0 redeemed. Progress fields
    (current_stamps, status, total_redeemed) are only written by
    StampService under a row lock.

    Wallet fields (passkit_id, wallet_pass_url, google_pay_url) are filled
    by volta.contrib.wallet when a digital pass is issued.
    """

    id = models.UUIDField(primary_key=True, default=uuid_lib.uuid4, editable=False)

    customer = models.ForeignKey(
        "volta.Customer",
        on_delete=models.CASCADE,
        related_name="enrollments",
        verbose_name=_("cliente"),
    )
    loyalty_card = models.ForeignKey(
        "volta.LoyaltyCard",
        on_delete=models.CASCADE,
        related_name="enrollments",
        verbose_name=_("cartão"),
    )

    current_stamps = models.PositiveIntegerField(_("selos atuais"), default=0)
    total_redeemed = models.PositiveIntegerField(
        _("recompensas"),
        default=0,
        help_text=_("Quantas vezes o cartão foi completado"),
    )
    status = models.CharField(
        _("status"),
        max_length=20,
        choices=EnrollmentStatusChoices.choices,
        default=EnrollmentStatusChoices.ACTIVE,
        db_index=True,
    )

    qr_code = models.CharField(_("QR code"), max_length=255, blank=True)

    # Digital wallet
    passkit_id = models.CharField(_("ID do passe"), max_length=100, blank=True)
    wallet_pass_url = models.URLField(_("Apple Wallet"), max_length=500, blank=True)
    google_pay_url = models.URLField(_("Google Pay"), max_length=500, blank=True)

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True)
    updated_at = models.DateTimeField(_("atualizado em"), auto_now=True)

    class Meta:
        verbose_name = _("cartão do cliente")
        verbose_name_plural = _("cartões dos clientes")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["customer", "loyalty_card"],
                name="volta_unique_enrollment",
            ),
        ]

    def __str__(self):
        return f"{self.customer.name}: {self.current_stamps}/{self.stamps_required} ({self.status})"

    @property
    def stamps_required(self) -> int:
        return self.loyalty_card.card_rules.stamps_required

    @property
    def stamps_remaining(self) -> int:
        """Stamps remaining to complete the card."""
        return max(0, self.stamps_required - self.current_stamps)

    @property
    def progress_percent(self) -> int:
        """Card completion percentage (0-100)."""
        return min(100, int(self.current_stamps / self.stamps_required * 100))

    @property
    def has_wallet_pass(self) -> bool:
        return bool(self.passkit_id)

    @property
    def state(self) -> EnrollmentState:
        return EnrollmentState(
            current_stamps=self.current_stamps,
            status=self.status,
            total_redeemed=self.total_redeemed,
        )
