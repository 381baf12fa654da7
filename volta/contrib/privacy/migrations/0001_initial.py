# Generated migration for PrivacyAuditLog

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("volta", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PrivacyAuditLog",
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
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("data_export", "Exportação de dados"),
                            ("data_deletion", "Exclusão de dados"),
                            ("data_anonymization", "Anonimização de dados"),
                            ("consent_updated", "Consentimento atualizado"),
                        ],
                        max_length=30,
                        verbose_name="ação",
                    ),
                ),
                (
                    "customer_reference",
                    models.CharField(db_index=True, max_length=40, verbose_name="referência do cliente"),
                ),
                ("performed_by", models.CharField(blank=True, max_length=200, verbose_name="executado por")),
                ("reason", models.TextField(blank=True, verbose_name="motivo")),
                ("details", models.JSONField(blank=True, default=dict, verbose_name="detalhes")),
                (
                    "compliance_notes",
                    models.JSONField(blank=True, default=list, verbose_name="notas de conformidade"),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="criado em"),
                ),
                (
                    "business",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="privacy_audit_logs",
                        to="volta.business",
                        verbose_name="estabelecimento",
                    ),
                ),
            ],
            options={
                "verbose_name": "registro de auditoria LGPD",
                "verbose_name_plural": "registros de auditoria LGPD",
                "ordering": ["-created_at"],
            },
        ),
    ]
