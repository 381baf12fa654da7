"""WalletRetryItem model — pending wallet pass updates."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class RetryStatus(models.TextChoices):
    PENDING = "pending", _("Pendente")
    SUCCEEDED = "succeeded", _("Concluído")
    FAILED = "failed", _("Falhou")


class WalletRetryItem(models.Model):
    """
    A wallet pass update that failed and is waiting to be retried.

    Stamp grants never wait for the wallet provider: when the pass update
    fails, an item is queued here and retried with exponential backoff by
    the ``volta_wallet_retry`` command. Retries push the enrollment's
    persisted balance, so replaying an item is idempotent.
    """

    enrollment = models.ForeignKey(
        "volta.CustomerLoyaltyCard",
        on_delete=models.CASCADE,
        related_name="wallet_retries",
        verbose_name=_("cartão do cliente"),
    )
    stamps_added = models.PositiveIntegerField(_("selos adicionados"), default=0)

    status = models.CharField(
        _("status"),
        max_length=20,
        choices=RetryStatus.choices,
        default=RetryStatus.PENDING,
        db_index=True,
    )
    attempts = models.PositiveIntegerField(_("tentativas"), default=0)
    max_attempts = models.PositiveIntegerField(_("máximo de tentativas"), default=3)
    last_error = models.TextField(_("último erro"), blank=True)

    next_retry_at = models.DateTimeField(_("próxima tentativa"), db_index=True)
    last_attempt_at = models.DateTimeField(_("última tentativa"), null=True, blank=True)

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True)
    updated_at = models.DateTimeField(_("atualizado em"), auto_now=True)

    class Meta:
        verbose_name = _("atualização de passe pendente")
        verbose_name_plural = _("atualizações de passe pendentes")
        ordering = ["next_retry_at"]

    def __str__(self):
        return f"{self.enrollment_id} ({self.status}, {self.attempts}/{self.max_attempts})"

    @property
    def is_exhausted(self) -> bool:
        return self.attempts >= self.max_attempts
