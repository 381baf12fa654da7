"""
Tests for volta.contrib.importer (CSV customer import).
"""

import json
from decimal import Decimal

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import RequestFactory

from volta.contrib.importer.service import ImportService, parse_date, read_rows
from volta.contrib.importer.views import ImportCustomersView, ImportTemplateView
from volta.exceptions import VoltaError
from volta.models import Customer, CustomerLoyaltyCard, StampTransaction

HEADER = "nome,telefone,email,tem_cartao,nome_cartao,selos_atuais,total_gasto,total_visitas,ultima_visita,tags\n"


def csv_bytes(*rows: str) -> bytes:
    return (HEADER + "\n".join(rows) + "\n").encode("utf-8")


@pytest.fixture(autouse=True)
def _enable_db(db):
    """Enable DB access for all tests."""


# ═══════════════════════════════════════════════════════════════════
# Parsing
# ═══════════════════════════════════════════════════════════════════


class TestParsing:
    @pytest.mark.parametrize("raw", ["2024-01-15", "15/01/2024", "15-01-2024"])
    def test_dates(self, raw):
        parsed = parse_date(raw)

        assert (parsed.year, parsed.month, parsed.day) == (2024, 1, 15)

    def test_bad_date(self):
        assert parse_date("ontem") is None
        assert parse_date("") is None

    def test_semicolon_and_bom(self):
        content = "\ufeffnome;telefone\nAna;41999990002\n".encode("utf-8")

        assert read_rows(content) == [{"nome": "Ana", "telefone": "41999990002"}]

    def test_latin1(self):
        content = "nome,telefone\nJosé,41999990002\n".encode("latin-1")

        assert read_rows(content)[0]["nome"] == "José"


# ═══════════════════════════════════════════════════════════════════
# Import
# ═══════════════════════════════════════════════════════════════════


class TestImport:
    def test_new_customer_with_card(self, business, card):
        result = ImportService.import_csv(
            business,
            csv_bytes("João Silva,(41) 98888-7777,joao@email.com,SIM,café fidelidade,5,150.50,10,2024-01-15,\"vip, ativo\""),
        )

        assert result.as_json()["success"] is True
        assert result.success_count == 1
        assert result.error_count == 0
        customer = Customer.objects.get(phone="+5541988887777")
        assert customer.business == business
        assert customer.total_spent == Decimal("150.50")
        assert customer.total_visits == 10
        assert customer.tags == ["vip", "ativo"]
        assert customer.consent["marketing"] is True
        enrollment = CustomerLoyaltyCard.objects.get(customer=customer)
        assert enrollment.loyalty_card == card
        assert enrollment.current_stamps == 5
        assert enrollment.status == "active"
        assert enrollment.qr_code
        tx = StampTransaction.objects.get()
        assert tx.transaction_type == "import"
        assert tx.stamps_added == 5

    def test_full_card_marked_completed(self, business, card):
        result = ImportService.import_csv(business, csv_bytes("Ana,41977776666,,SIM,Café Fidelidade,10,,,,"))

        enrollment = CustomerLoyaltyCard.objects.get()
        assert enrollment.status == "completed"
        assert enrollment.total_redeemed == 1
        assert result.warnings[0]["warning"] == "Cartão automaticamente marcado como completo (10/10 selos)"

    def test_existing_customer_updated(self, business, customer):
        result = ImportService.import_csv(business, csv_bytes("Maria S. Souza,41999990001,,NAO,,,,3,,"))

        customer.refresh_from_db()
        assert customer.name == "Maria S. Souza"
        assert customer.total_visits == 3
        assert customer.email == "maria@example.com"
        assert result.warnings == [
            {"row": 2, "warning": "Cliente já existia e foi atualizado", "data": result.warnings[0]["data"]}
        ]
        assert Customer.objects.count() == 1

    def test_existing_enrollment_updated(self, business, customer, card, enrollment):
        ImportService.import_csv(business, csv_bytes("Maria,41999990001,,SIM,Café Fidelidade,4,,,,"))

        enrollment.refresh_from_db()
        assert enrollment.current_stamps == 4

    def test_row_errors(self, business, card):
        result = ImportService.import_csv(
            business,
            csv_bytes(
                ",41977776666,,,,,,,,",
                "Sem Telefone,,,,,,,,,",
                "Fone Curto,123,,,,,,,,",
                "Email Ruim,41977776666,nao-email,,,,,,,",
                "Sem Cartao,41977776666,,SIM,,,,,,",
                "Cartao Errado,41977776666,,SIM,Inexistente,,,,,",
                "Selos Demais,41977776666,,SIM,Café Fidelidade,11,,,,",
                "Gasto Ruim,41977776666,,,,,abc,,,",
            ),
        )

        assert result.success is False
        assert [e["row"] for e in result.errors] == [2, 3, 4, 5, 6, 7, 8, 9]
        assert [e["error"] for e in result.errors] == [
            "Nome é obrigatório",
            "Telefone é obrigatório",
            "Telefone deve ter entre 10 e 13 dígitos",
            "Email inválido",
            "Nome do cartão é obrigatório quando tem_cartao = SIM",
            'Cartão "Inexistente" não encontrado',
            'Número de selos (11) não pode ser maior que o máximo do cartão "Café Fidelidade" (10)',
            "Valor inválido para total_gasto: abc",
        ]
        assert not Customer.objects.exists()

    def test_blank_rows_skipped(self, business):
        result = ImportService.import_csv(business, csv_bytes(",,,,,,,,,", "Ana,41977776666,,,,,,,,"))

        assert result.total_rows == 2
        assert result.success_count == 1
        assert result.error_count == 0

    def test_card_of_other_business_not_found(self, business, other_business):
        from volta.models import LoyaltyCard

        LoyaltyCard.objects.create(business=other_business, name="Outro")

        result = ImportService.import_csv(business, csv_bytes("Ana,41977776666,,SIM,Outro,,,,,"))

        assert result.errors[0]["error"] == 'Cartão "Outro" não encontrado'

    def test_empty_file(self, business):
        with pytest.raises(VoltaError) as exc:
            ImportService.import_csv(business, HEADER.encode())

        assert exc.value.code == "INVALID_REQUEST"

    def test_too_many_rows(self, business, settings):
        settings.VOLTA = {"IMPORT_MAX_ROWS": 1}

        with pytest.raises(VoltaError) as exc:
            ImportService.import_csv(business, csv_bytes("A,41977776666", "B,41977776667"))

        assert exc.value.message == "Too many rows. Maximum 1 rows allowed per import"

    def test_too_large(self, business, settings):
        settings.VOLTA = {"IMPORT_MAX_BYTES": 10}

        with pytest.raises(VoltaError) as exc:
            ImportService.import_csv(business, csv_bytes("Ana,41977776666"))

        assert exc.value.message.startswith("File too large")


# ═══════════════════════════════════════════════════════════════════
# Template and endpoints
# ═══════════════════════════════════════════════════════════════════


class TestTemplate:
    def test_uses_first_card(self, business, card):
        lines = ImportService.template_csv(business).splitlines()

        assert lines[0] == HEADER.strip()
        assert "Café Fidelidade" in lines[1]

    def test_without_cards(self, business):
        assert "Cartão Exemplo" in ImportService.template_csv(business)


class TestImportViews:
    def test_upload(self, user, card):
        upload = SimpleUploadedFile("clientes.csv", csv_bytes("Ana,41977776666,,SIM,Café Fidelidade,2,,,,"))
        request = RequestFactory().post("/", data={"file": upload})
        request.user = user

        response = ImportCustomersView.as_view()(request)

        body = json.loads(response.content)
        assert response.status_code == 200
        assert body["success_count"] == 1
        assert StampTransaction.objects.get().created_by == user.email

    def test_missing_file(self, user):
        request = RequestFactory().post("/", data={})
        request.user = user

        response = ImportCustomersView.as_view()(request)

        assert response.status_code == 400

    def test_wrong_extension(self, user):
        upload = SimpleUploadedFile("clientes.xlsx", b"PK")
        request = RequestFactory().post("/", data={"file": upload})
        request.user = user

        response = ImportCustomersView.as_view()(request)

        assert response.status_code == 400

    def test_template_download(self, user, card):
        request = RequestFactory().get("/")
        request.user = user

        response = ImportTemplateView.as_view()(request)

        assert response.status_code == 200
        assert response["Content-Type"].startswith("text/csv")
        assert "attachment" in response["Content-Disposition"]
