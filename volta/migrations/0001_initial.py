# Generated migration for the Volta core models

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Business",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="nome")),
                ("email", models.EmailField(max_length=254, unique=True, verbose_name="email")),
                ("phone", models.CharField(blank=True, max_length=20, verbose_name="telefone")),
                ("address", models.CharField(blank=True, max_length=255, verbose_name="endereço")),
                ("logo_url", models.URLField(blank=True, verbose_name="logo")),
                (
                    "settings",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="business_type, ai_tone, brand_voice",
                        verbose_name="configurações",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
            ],
            options={
                "verbose_name": "estabelecimento",
                "verbose_name_plural": "estabelecimentos",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="LoyaltyCard",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="nome")),
                ("description", models.TextField(blank=True, verbose_name="descrição")),
                ("design", models.JSONField(blank=True, default=dict, verbose_name="design")),
                (
                    "rules",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="stamps_required, reward_description, max_stamps_per_day, expiry_days",
                        verbose_name="regras",
                    ),
                ),
                (
                    "enrollment_form",
                    models.JSONField(blank=True, default=dict, verbose_name="formulário de inscrição"),
                ),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="ativo")),
                ("wallet_enabled", models.BooleanField(default=False, verbose_name="carteira digital")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                (
                    "business",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="loyalty_cards",
                        to="volta.business",
                        verbose_name="estabelecimento",
                    ),
                ),
            ],
            options={
                "verbose_name": "cartão fidelidade",
                "verbose_name_plural": "cartões fidelidade",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Customer",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="nome")),
                ("phone", models.CharField(db_index=True, max_length=20, verbose_name="telefone")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email")),
                (
                    "custom_fields",
                    models.JSONField(blank=True, default=dict, verbose_name="campos personalizados"),
                ),
                ("tags", models.JSONField(blank=True, default=list, verbose_name="tags")),
                ("consent", models.JSONField(blank=True, default=dict, verbose_name="consentimento")),
                (
                    "enrollment_date",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        verbose_name="data de inscrição",
                    ),
                ),
                ("total_visits", models.IntegerField(default=0, verbose_name="total de visitas")),
                (
                    "total_spent",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=12,
                        null=True,
                        verbose_name="total gasto",
                    ),
                ),
                ("last_visit", models.DateTimeField(blank=True, null=True, verbose_name="última visita")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
                (
                    "business",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="customers",
                        to="volta.business",
                        verbose_name="estabelecimento",
                    ),
                ),
            ],
            options={
                "verbose_name": "cliente",
                "verbose_name_plural": "clientes",
                "ordering": ["name"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("business", "phone"),
                        name="volta_unique_customer_phone_per_business",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CustomerLoyaltyCard",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("current_stamps", models.PositiveIntegerField(default=0, verbose_name="selos atuais")),
                (
                    "total_redeemed",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Quantas vezes o cartão foi completado",
                        verbose_name="recompensas",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Ativo"),
                            ("completed", "Completo"),
                            ("expired", "Expirado"),
                        ],
                        db_index=True,
                        default="active",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("qr_code", models.CharField(blank=True, max_length=255, verbose_name="QR code")),
                ("passkit_id", models.CharField(blank=True, max_length=100, verbose_name="ID do passe")),
                (
                    "wallet_pass_url",
                    models.URLField(blank=True, max_length=500, verbose_name="Apple Wallet"),
                ),
                (
                    "google_pay_url",
                    models.URLField(blank=True, max_length=500, verbose_name="Google Pay"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="enrollments",
                        to="volta.customer",
                        verbose_name="cliente",
                    ),
                ),
                (
                    "loyalty_card",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="enrollments",
                        to="volta.loyaltycard",
                        verbose_name="cartão",
                    ),
                ),
            ],
            options={
                "verbose_name": "cartão do cliente",
                "verbose_name_plural": "cartões dos clientes",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("customer", "loyalty_card"),
                        name="volta_unique_enrollment",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="StampTransaction",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("stamps_added", models.IntegerField(verbose_name="selos adicionados")),
                (
                    "transaction_type",
                    models.CharField(
                        choices=[
                            ("manual", "Manual"),
                            ("qr_scan", "Leitura de QR"),
                            ("import", "Importação"),
                            ("reset", "Reinício"),
                        ],
                        default="manual",
                        max_length=20,
                        verbose_name="tipo",
                    ),
                ),
                ("notes", models.CharField(blank=True, max_length=255, verbose_name="observações")),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="criado em"),
                ),
                ("created_by", models.CharField(blank=True, max_length=255, verbose_name="criado por")),
                (
                    "enrollment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transactions",
                        to="volta.customerloyaltycard",
                        verbose_name="cartão do cliente",
                    ),
                ),
            ],
            options={
                "verbose_name": "transação de selos",
                "verbose_name_plural": "transações de selos",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["enrollment", "-created_at"],
                        name="volta_stamptx_enroll_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Campaign",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="nome")),
                (
                    "type",
                    models.CharField(
                        choices=[("manual", "Manual"), ("ai_generated", "Gerada por IA")],
                        default="manual",
                        max_length=20,
                        verbose_name="tipo",
                    ),
                ),
                ("content", models.JSONField(blank=True, default=dict, verbose_name="conteúdo")),
                ("target_audience", models.JSONField(blank=True, default=dict, verbose_name="público-alvo")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Rascunho"),
                            ("active", "Ativa"),
                            ("paused", "Pausada"),
                            ("completed", "Concluída"),
                        ],
                        default="draft",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                (
                    "business",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="campaigns",
                        to="volta.business",
                        verbose_name="estabelecimento",
                    ),
                ),
            ],
            options={
                "verbose_name": "campanha",
                "verbose_name_plural": "campanhas",
                "ordering": ["-created_at"],
            },
        ),
    ]
