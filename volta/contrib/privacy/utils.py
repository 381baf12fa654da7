"""
LGPD helpers - pure functions over customer data.

External ids and customer references are keyed hashes
(sha256 of the ids plus VOLTA["PRIVACY_HASH_KEY"]): deterministic,
non-reversible, and safe to hand to third parties or write to logs.
"""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from volta.conf import volta_settings
from volta.protocols.wallet import PassPerson

ALLOWED_PERSONAL_DATA = ("name", "phone", "email")

CONSENT_ISSUE = "Data de consentimento não documentada"
RETENTION_ISSUE = "Dados além do período de retenção"


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def _key(key: str | None) -> str:
    return volta_settings.PRIVACY_HASH_KEY if key is None else key


def generate_external_id(customer_id, business_id, key: str | None = None) -> str:
    """Provider-facing id: ext_ + 16 hex chars."""
    return "ext_" + _digest(f"{customer_id}:{business_id}:{_key(key)}")[:16]


def create_customer_reference(customer_id, key: str | None = None) -> str:
    """Log-safe customer reference: cust_ + 12 hex chars."""
    return "cust_" + _digest(f"{customer_id}:{_key(key)}")[:12]


def _mask(value: str, min_stars: int = 1) -> str:
    return value[:1] + "*" * max(min_stars, len(value) - 2) + value[-1:]


def anonymize_personal_data(data: dict) -> dict:
    """
    Copy of ``data`` with name, email and phone masked.

    "Maria" -> "M***a", "joao@x.com" -> "j**o@x.com", "+5511999" -> "+5****99".
    Other keys are kept as is.
    """
    anonymized = dict(data)

    if anonymized.get("name"):
        anonymized["name"] = _mask(str(anonymized["name"]))

    if anonymized.get("email"):
        local, _, domain = str(anonymized["email"]).partition("@")
        anonymized["email"] = f"{_mask(local)}@{domain}"

    if anonymized.get("phone"):
        phone = str(anonymized["phone"])
        anonymized["phone"] = phone[:2] + "*" * max(4, len(phone) - 4) + phone[-2:]

    return anonymized


def _as_datetime(value) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = parse_datetime(str(value))
        if dt is None:
            return None
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt, dt_timezone.utc)
    return dt


@dataclass(frozen=True)
class RetentionCheck:
    should_delete: bool
    days_remaining: int


def check_data_retention(created_at, retention_days: int | None = None, now: datetime | None = None) -> RetentionCheck:
    """Whether data created at ``created_at`` is past the retention period."""
    if retention_days is None:
        retention_days = volta_settings.DATA_RETENTION_DAYS
    now = now or timezone.now()
    created = _as_datetime(created_at) or now
    days = (now - created).days
    return RetentionCheck(
        should_delete=days > retention_days,
        days_remaining=max(0, retention_days - days),
    )


@dataclass
class ComplianceCheck:
    """Result of an LGPD compliance validation."""

    is_compliant: bool
    issues: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    @property
    def critical_issues(self) -> list[str]:
        """Issues that block sharing data (missing consent, expired retention)."""
        return [i for i in self.issues if "consentimento" in i or "retenção" in i]


def validate_lgpd_compliance(
    customer_id,
    personal_data_stored: list[str],
    consent_date=None,
    created_at=None,
    last_accessed=None,
    now: datetime | None = None,
) -> ComplianceCheck:
    """
    Validate the data held for a customer's wallet pass.

    Checks documented consent, data minimization (only name, phone,
    email), retention period, and long inactivity (recommendation only).
    """
    now = now or timezone.now()
    issues = []
    recommendations = []

    if not consent_date:
        issues.append(CONSENT_ISSUE)
        recommendations.append("Registrar data de consentimento LGPD")

    unnecessary = [f for f in personal_data_stored if f not in ALLOWED_PERSONAL_DATA]
    if unnecessary:
        issues.append(f"Dados desnecessários armazenados: {', '.join(unnecessary)}")
        recommendations.append("Remover dados pessoais desnecessários")

    if check_data_retention(created_at, now=now).should_delete:
        issues.append(RETENTION_ISSUE)
        recommendations.append("Considerar exclusão ou anonimização dos dados")

    accessed = _as_datetime(last_accessed)
    if accessed and (now - accessed).days > 365:
        recommendations.append("Usuário inativo há mais de 1 ano - considerar exclusão")

    return ComplianceCheck(
        is_compliant=not issues,
        issues=issues,
        recommendations=recommendations,
    )


@dataclass(frozen=True)
class PrivacyPassData:
    """Minimized customer data for a wallet pass provider."""

    external_id: str
    person: PassPerson
    customer_reference: str


def privacy_compliant_pass_data(customer, business_id) -> PrivacyPassData:
    """Pass person data with the first name only and a hashed external id."""
    return PrivacyPassData(
        external_id=generate_external_id(customer.pk, business_id),
        person=PassPerson(
            surname=customer.name.split(" ")[0] if customer.name else "",
            mobile_number=customer.phone,
            email_address=customer.email or "",
        ),
        customer_reference=create_customer_reference(customer.pk),
    )


def create_audit_entry(
    action: str,
    customer_id,
    performed_by: str,
    details: dict,
    compliance_notes: list[str] | None = None,
) -> dict:
    """Audit record with the customer reference and anonymized details."""
    return {
        "timestamp": timezone.now().isoformat(),
        "action": action,
        "customer_reference": create_customer_reference(customer_id),
        "performed_by": performed_by,
        "details": anonymize_personal_data(details or {}),
        "compliance_notes": list(compliance_notes or []),
    }
