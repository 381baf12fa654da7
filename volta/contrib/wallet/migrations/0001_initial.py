# Generated migration for WalletRetryItem

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("volta", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="WalletRetryItem",
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
                ("stamps_added", models.PositiveIntegerField(default=0, verbose_name="selos adicionados")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pendente"),
                            ("succeeded", "Concluído"),
                            ("failed", "Falhou"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("attempts", models.PositiveIntegerField(default=0, verbose_name="tentativas")),
                ("max_attempts", models.PositiveIntegerField(default=3, verbose_name="máximo de tentativas")),
                ("last_error", models.TextField(blank=True, verbose_name="último erro")),
                ("next_retry_at", models.DateTimeField(db_index=True, verbose_name="próxima tentativa")),
                ("last_attempt_at", models.DateTimeField(blank=True, null=True, verbose_name="última tentativa")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
                (
                    "enrollment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="wallet_retries",
                        to="volta.customerloyaltycard",
                        verbose_name="cartão do cliente",
                    ),
                ),
            ],
            options={
                "verbose_name": "atualização de passe pendente",
                "verbose_name_plural": "atualizações de passe pendentes",
                "ordering": ["next_retry_at"],
            },
        ),
    ]
