"""PrivacyAuditLog model — append-only trail of LGPD actions."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class PrivacyAction(models.TextChoices):
    DATA_EXPORT = "data_export", _("Exportação de dados")
    DATA_DELETION = "data_deletion", _("Exclusão de dados")
    DATA_ANONYMIZATION = "data_anonymization", _("Anonimização de dados")
    CONSENT_UPDATED = "consent_updated", _("Consentimento atualizado")


class PrivacyAuditLog(models.Model):
    """
    One LGPD action on a customer's data.

    The customer is stored as a hashed reference (cust_...), never as a
    foreign key: the row must survive the customer's deletion and must not
    identify them. ``details`` is anonymized before it is written.
    """

    business = models.ForeignKey(
        "volta.Business",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="privacy_audit_logs",
        verbose_name=_("estabelecimento"),
    )
    action = models.CharField(_("ação"), max_length=30, choices=PrivacyAction.choices)
    customer_reference = models.CharField(_("referência do cliente"), max_length=40, db_index=True)
    performed_by = models.CharField(_("executado por"), max_length=200, blank=True)
    reason = models.TextField(_("motivo"), blank=True)
    details = models.JSONField(_("detalhes"), default=dict, blank=True)
    compliance_notes = models.JSONField(_("notas de conformidade"), default=list, blank=True)
    created_at = models.DateTimeField(_("criado em"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("registro de auditoria LGPD")
        verbose_name_plural = _("registros de auditoria LGPD")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.get_action_display()} - {self.customer_reference}"
