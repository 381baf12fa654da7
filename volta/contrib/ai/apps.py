"""AI app config."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AIConfig(AppConfig):
    name = "volta.contrib.ai"
    label = "volta_ai"
    verbose_name = _("Inteligência Artificial")
