"""Importer app config."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ImporterConfig(AppConfig):
    name = "volta.contrib.importer"
    label = "volta_importer"
    verbose_name = _("Importação de Clientes")
