"""Wallet app config."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class WalletConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "volta.contrib.wallet"
    label = "volta_wallet"
    verbose_name = _("Carteira Digital")
