"""Privacy service — LGPD data subject requests on wallet pass data."""

import logging

from django.utils import timezone

from volta.conf import load_backend
from volta.contrib.privacy.models import PrivacyAction, PrivacyAuditLog
from volta.contrib.privacy.utils import anonymize_personal_data, create_audit_entry
from volta.contrib.wallet.passes import safe_wallet_operation
from volta.exceptions import VoltaError, WalletPassError
from volta.models import Business, CustomerLoyaltyCard, EnrollmentStatusChoices
from volta.protocols.wallet import PassUpdate
from volta.services import customer as customer_service

logger = logging.getLogger(__name__)

ACTIONS = ("export", "delete", "anonymize")

_AUDIT_ACTIONS = {
    "export": PrivacyAction.DATA_EXPORT,
    "delete": PrivacyAction.DATA_DELETION,
    "anonymize": PrivacyAction.DATA_ANONYMIZATION,
}

RETENTION_POLICY = "Dados mantidos conforme política de retenção da empresa"
RIGHTS_INFORMATION = (
    "Você tem direito a acessar, corrigir, apagar ou portar seus dados conforme a LGPD"
)


class PrivacyService:
    """
    Service for LGPD requests.

    Uses @classmethod for extensibility (consistent with other contrib services).
    """

    @classmethod
    def wallet_data(
        cls,
        business: Business,
        customer_id,
        action: str,
        reason: str = "",
        requested_by: str = "",
        backend=None,
    ) -> dict:
        """
        Run an LGPD request on a customer's wallet pass data.

        Args:
            business: Authenticated business (the customer must belong to it)
            customer_id: Customer id
            action: export, delete or anonymize
            reason: Free-text reason stored in the audit log
            requested_by: Who asked (defaults to "system")
            backend: Wallet pass backend for delete/anonymize

        Returns:
            {"success", "message", "data"?, "details"?}

        Raises:
            VoltaError: INVALID_REQUEST, CUSTOMER_NOT_FOUND
        """
        if not customer_id:
            raise VoltaError("INVALID_REQUEST", message="customer_id is required")
        if action not in ACTIONS:
            raise VoltaError(
                "INVALID_REQUEST",
                message="Invalid action. Must be: export, delete, or anonymize",
            )

        customer = customer_service.get_for_business(business, customer_id)
        enrollments = list(
            CustomerLoyaltyCard.objects
            .filter(customer=customer)
            .select_related("loyalty_card")
            .order_by("created_at")
        )
        performed_by = requested_by or "system"

        handler = getattr(cls, f"_{action}")
        result, details = handler(customer, enrollments, performed_by, backend)

        cls.record(
            create_audit_entry(_AUDIT_ACTIONS[action], customer.pk, performed_by, {**details, "reason": reason}),
            business=business,
            reason=reason,
        )
        return result

    @classmethod
    def record(cls, entry: dict, business: Business | None = None, reason: str = "") -> PrivacyAuditLog:
        """Persist an audit entry built by utils.create_audit_entry."""
        log = PrivacyAuditLog.objects.create(
            business=business,
            action=entry["action"],
            customer_reference=entry["customer_reference"],
            performed_by=entry["performed_by"],
            reason=reason,
            details=entry["details"],
            compliance_notes=entry["compliance_notes"],
        )
        logger.info(
            "LGPD audit: %s %s by %s",
            entry["action"],
            entry["customer_reference"],
            entry["performed_by"],
        )
        return log

    # ======================================================================
    # Actions
    # ======================================================================

    @classmethod
    def _export(cls, customer, enrollments, performed_by, backend):
        passes = [
            {
                "id": str(e.pk),
                "loyalty_card_name": e.loyalty_card.name,
                "passkit_id": e.passkit_id,
                "wallet_pass_url": e.wallet_pass_url,
                "google_pay_url": e.google_pay_url,
                "current_stamps": e.current_stamps,
                "total_redeemed": e.total_redeemed,
                "status": e.status,
                "created_at": e.created_at.isoformat(),
                "last_updated": e.updated_at.isoformat(),
            }
            for e in enrollments
            if e.passkit_id or e.wallet_pass_url
        ]
        data = {
            "customer": {
                "id": str(customer.pk),
                "name": customer.name,
                "phone": customer.phone,
                "email": customer.email,
                "enrollment_date": customer.enrollment_date.isoformat(),
            },
            "wallet_passes": passes,
            "wallet_summary": {
                "total_passes": len(passes),
                "active_passes": sum(1 for p in passes if p["status"] == EnrollmentStatusChoices.ACTIVE),
                "last_activity": max((p["created_at"] for p in passes), default=None),
            },
            "export_info": {
                "export_date": timezone.now().isoformat(),
                "exported_by": performed_by,
                "data_retention_policy": RETENTION_POLICY,
                "rights_information": RIGHTS_INFORMATION,
            },
        }
        result = {
            "success": True,
            "data": data,
            "message": "Dados da carteira digital exportados com sucesso",
        }
        return result, {"exported_passes": len(passes)}

    @classmethod
    def _delete(cls, customer, enrollments, performed_by, backend):
        wallet = backend or load_backend("WALLET_BACKEND")
        targets = [e for e in enrollments if e.passkit_id]
        deleted = 0
        errors = []

        for enrollment in targets:
            pass_id = enrollment.passkit_id
            try:
                safe_wallet_operation(lambda: wallet.delete_member(pass_id), "pass deletion")
            except WalletPassError as exc:
                errors.append(f"Erro ao deletar cartão {enrollment.pk}: {exc.message}")
                continue
            enrollment.passkit_id = ""
            enrollment.wallet_pass_url = ""
            enrollment.google_pay_url = ""
            enrollment.save(update_fields=["passkit_id", "wallet_pass_url", "google_pay_url", "updated_at"])
            deleted += 1

        message = f"{deleted} carteira(s) digital(is) deletada(s) com sucesso"
        if errors:
            message += f". {len(errors)} erro(s) ocorreram."
        result = {"success": not errors, "message": message}
        if errors:
            result["details"] = "; ".join(errors)
        return result, {"deleted_passes": deleted, "total_passes": len(targets), "errors": len(errors)}

    @classmethod
    def _anonymize(cls, customer, enrollments, performed_by, backend):
        wallet = backend or load_backend("WALLET_BACKEND")
        targets = [e for e in enrollments if e.passkit_id]
        masked = anonymize_personal_data({"name": customer.first_name, "phone": customer.phone})
        anonymized = 0

        for enrollment in targets:
            update = PassUpdate(
                pass_id=enrollment.passkit_id,
                fields={
                    "name": {"value": masked["name"], "label": "Nome"},
                    "phone": {"value": masked["phone"], "label": "Telefone"},
                },
            )
            try:
                safe_wallet_operation(lambda: wallet.update_member(update), "pass anonymization")
            except WalletPassError as exc:
                logger.error("Anonymization failed for card %s: %s", enrollment.pk, exc.message)
                continue
            anonymized += 1

        result = {
            "success": True,
            "message": f"{anonymized} carteira(s) digital(is) anonimizada(s) com sucesso",
        }
        return result, {"anonymized_passes": anonymized, "total_passes": len(targets)}
