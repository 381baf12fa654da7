from django.apps import AppConfig


class VoltaConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "volta"
    verbose_name = "Volta - Cartões Fidelidade"
