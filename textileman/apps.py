"""Django app configuration for Textileman."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class TextilemanConfig(AppConfig):
    """Configuration for Textileman app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "textileman"
    verbose_name = _("Textile Trading")
