"""Import service - create or update customers (and their cards) from a CSV.

One spreadsheet row per customer. Rows are validated and written one at a
time; a bad row is reported and skipped, it never aborts the import.

Columns:
    nome, telefone, email, tem_cartao, nome_cartao, selos_atuais,
    total_gasto, total_visitas, ultima_visita, tags
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation

from django.db import DatabaseError, transaction
from django.utils import timezone

from volta.conf import volta_settings
from volta.exceptions import VoltaError
from volta.models import (
    Business,
    Customer,
    CustomerLoyaltyCard,
    EnrollmentStatusChoices,
    LoyaltyCard,
    StampTransaction,
    StampTransactionType,
)
from volta.services.customer import make_qr_code
from volta.utils import is_valid_email, validate_phone

logger = logging.getLogger(__name__)

COLUMNS = [
    "nome",
    "telefone",
    "email",
    "tem_cartao",
    "nome_cartao",
    "selos_atuais",
    "total_gasto",
    "total_visitas",
    "ultima_visita",
    "tags",
]

DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y")

IMPORT_NOTE = "Selos importados da planilha"


class RowError(ValueError):
    """A row that cannot be imported."""


@dataclass
class ImportResult:
    total_rows: int = 0
    success_count: int = 0
    errors: list[dict] = field(default_factory=list)
    warnings: list[dict] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def success(self) -> bool:
        return self.success_count > 0

    def add_error(self, row: int, error: str, data: dict) -> None:
        self.errors.append({"row": row, "error": error, "data": data})

    def add_warning(self, row: int, warning: str, data: dict) -> None:
        self.warnings.append({"row": row, "warning": warning, "data": data})

    def as_json(self) -> dict:
        return {
            "success": self.success,
            "total_rows": self.total_rows,
            "success_count": self.success_count,
            "error_count": self.error_count,
            "errors": self.errors,
            "warnings": self.warnings,
        }


@dataclass
class ParsedRow:
    name: str
    phone: str
    email: str = ""
    card: LoyaltyCard | None = None
    current_stamps: int = 0
    total_spent: Decimal | None = None
    total_visits: int = 0
    last_visit: datetime | None = None
    tags: list[str] = field(default_factory=list)


def parse_date(value: str) -> datetime | None:
    """
    Parse a visit date (YYYY-MM-DD, DD/MM/YYYY or DD-MM-YYYY).

    Returns an aware datetime at midnight, or None if unparseable.
    """
    value = (value or "").strip()
    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        return timezone.make_aware(parsed)
    return None


def _parse_int(value: str, column: str) -> int:
    value = (value or "").strip()
    if not value:
        return 0
    try:
        number = int(value)
    except ValueError:
        raise RowError(f"Valor inválido para {column}: {value}")
    if number < 0:
        raise RowError(f"Valor inválido para {column}: {value}")
    return number


def _parse_money(value: str) -> Decimal | None:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return Decimal(value.replace(",", "."))
    except InvalidOperation:
        raise RowError(f"Valor inválido para total_gasto: {value}")


def read_rows(content: bytes) -> list[dict]:
    """
    Decode the CSV into row dicts keyed by lower-cased column name.

    Accepts UTF-8 (with or without BOM) and Latin-1; sniffs ``,`` or ``;``.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = content.decode("latin-1")

    sample = text[:4096]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=",;")
    except csv.Error:
        dialect = csv.excel

    reader = csv.DictReader(io.StringIO(text), dialect=dialect)
    rows = []
    for raw in reader:
        rows.append({
            (key or "").strip().lower(): (value or "").strip() if isinstance(value, str) else ""
            for key, value in raw.items()
            if key
        })
    return rows


class ImportService:
    """
    Service for customer imports.

    Uses @classmethod for extensibility (consistent with other contrib services).
    """

    @classmethod
    def import_csv(
        cls,
        business: Business,
        content: bytes,
        created_by: str = "",
        record_transactions: bool = True,
    ) -> ImportResult:
        """
        Import customers of a business from CSV bytes.

        Customers are matched by (business, phone): existing ones are
        updated, new ones are created with marketing and data processing
        consent. When ``tem_cartao`` is SIM the customer is enrolled in the
        named card with ``selos_atuais`` stamps; a full card is marked
        completed.

        Args:
            business: Authenticated business
            content: Raw CSV file content
            created_by: Who ran the import (stored on stamp transactions)
            record_transactions: Log imported stamps as "import" transactions

        Returns:
            ImportResult with per-row errors and warnings

        Raises:
            VoltaError: INVALID_REQUEST if the file is too large, empty or
                has too many rows
        """
        max_bytes = volta_settings.IMPORT_MAX_BYTES
        if len(content) > max_bytes:
            raise VoltaError(
                "INVALID_REQUEST",
                message=f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB",
            )

        rows = read_rows(content)
        if not rows:
            raise VoltaError("INVALID_REQUEST", message="Planilha vazia ou sem dados válidos")

        max_rows = volta_settings.IMPORT_MAX_ROWS
        if len(rows) > max_rows:
            raise VoltaError(
                "INVALID_REQUEST",
                message=f"Too many rows. Maximum {max_rows} rows allowed per import",
            )

        cards = {
            card.name.lower(): card
            for card in LoyaltyCard.objects.filter(business=business, is_active=True)
        }
        result = ImportResult(total_rows=len(rows))

        for index, row in enumerate(rows):
            row_number = index + 2
            if not row.get("nome") and not row.get("telefone"):
                continue

            try:
                parsed = cls.parse_row(row, cards)
            except RowError as exc:
                result.add_error(row_number, str(exc), row)
                continue

            try:
                with transaction.atomic():
                    cls._import_row(business, parsed, row, row_number, result, created_by, record_transactions)
            except DatabaseError as exc:
                logger.exception("Import failed on row %s", row_number)
                result.add_error(row_number, f"Erro interno: {exc}", row)
                continue

            result.success_count += 1

        logger.info(
            "Import finished for business %s: %s ok, %s errors",
            business.pk,
            result.success_count,
            result.error_count,
        )
        return result

    @classmethod
    def parse_row(cls, row: dict, cards: dict[str, LoyaltyCard]) -> ParsedRow:
        """
        Validate one spreadsheet row.

        Args:
            row: Row dict keyed by column name
            cards: The business's active cards keyed by lower-cased name

        Raises:
            RowError: With the message reported for the row
        """
        name = row.get("nome", "")
        if not name:
            raise RowError("Nome é obrigatório")
        if not row.get("telefone"):
            raise RowError("Telefone é obrigatório")

        valid, phone, error = validate_phone(row["telefone"])
        if not valid:
            raise RowError(error)

        email = row.get("email", "")
        if not is_valid_email(email):
            raise RowError("Email inválido")

        card = None
        if row.get("tem_cartao", "").upper() == "SIM":
            card_name = row.get("nome_cartao", "")
            if not card_name:
                raise RowError("Nome do cartão é obrigatório quando tem_cartao = SIM")
            card = cards.get(card_name.lower())
            if card is None:
                raise RowError(f'Cartão "{card_name}" não encontrado')

        current_stamps = _parse_int(row.get("selos_atuais", ""), "selos_atuais")
        if card is not None and current_stamps > 0:
            max_stamps = card.card_rules.stamps_required
            if current_stamps > max_stamps:
                raise RowError(
                    f"Número de selos ({current_stamps}) não pode ser maior que "
                    f'o máximo do cartão "{card.name}" ({max_stamps})'
                )

        tags = [tag.strip() for tag in row.get("tags", "").split(",") if tag.strip()]

        return ParsedRow(
            name=name,
            phone=phone,
            email=email,
            card=card,
            current_stamps=current_stamps,
            total_spent=_parse_money(row.get("total_gasto", "")),
            total_visits=_parse_int(row.get("total_visitas", ""), "total_visitas"),
            last_visit=parse_date(row.get("ultima_visita", "")),
            tags=tags,
        )

    @classmethod
    def template_csv(cls, business: Business) -> str:
        """Import template: header plus one example row."""
        first_card = (
            LoyaltyCard.objects.filter(business=business, is_active=True)
            .order_by("created_at")
            .first()
        )
        example = [
            "João Silva",
            "+5511999887766",
            "joao@email.com",
            "SIM",
            first_card.name if first_card else "Cartão Exemplo",
            "5",
            "150.50",
            "10",
            "2024-01-15",
            "cliente_vip, ativo",
        ]
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(COLUMNS)
        writer.writerow(example)
        return buffer.getvalue()

    # ======================================================================
    # Internals
    # ======================================================================

    @classmethod
    def _import_row(cls, business, parsed: ParsedRow, row, row_number, result, created_by, record_transactions):
        customer = Customer.objects.filter(business=business, phone=parsed.phone).first()
        if customer:
            customer.name = parsed.name
            customer.email = parsed.email or customer.email
            customer.total_visits = parsed.total_visits
            customer.tags = parsed.tags
            if parsed.total_spent is not None:
                customer.total_spent = parsed.total_spent
            if parsed.last_visit is not None:
                customer.last_visit = parsed.last_visit
            customer.save()
            result.add_warning(row_number, "Cliente já existia e foi atualizado", row)
        else:
            customer = Customer.objects.create(
                business=business,
                name=parsed.name,
                phone=parsed.phone,
                email=parsed.email,
                total_spent=parsed.total_spent,
                total_visits=parsed.total_visits,
                last_visit=parsed.last_visit,
                tags=parsed.tags,
                consent={
                    "marketing": True,
                    "data_processing": True,
                    "consent_date": timezone.now().isoformat(),
                },
            )

        card = parsed.card
        if card is None:
            return

        max_stamps = card.card_rules.stamps_required
        completed = parsed.current_stamps >= max_stamps
        progress = {
            "current_stamps": parsed.current_stamps,
            "status": EnrollmentStatusChoices.COMPLETED if completed else EnrollmentStatusChoices.ACTIVE,
            "total_redeemed": 1 if completed else 0,
        }
        enrollment, created = CustomerLoyaltyCard.objects.get_or_create(
            customer=customer,
            loyalty_card=card,
            defaults={**progress, "qr_code": make_qr_code(customer, card)},
        )
        if not created:
            for attr, value in progress.items():
                setattr(enrollment, attr, value)
            enrollment.save(update_fields=[*progress, "updated_at"])

        if record_transactions and parsed.current_stamps > 0:
            StampTransaction.objects.create(
                enrollment=enrollment,
                stamps_added=parsed.current_stamps,
                transaction_type=StampTransactionType.IMPORT,
                notes=IMPORT_NOTE,
                created_by=created_by,
            )

        if completed:
            result.add_warning(
                row_number,
                f"Cartão automaticamente marcado como completo ({parsed.current_stamps}/{max_stamps} selos)",
                row,
            )
