"""Django app configuration for Rackman."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class RackmanConfig(AppConfig):
    """Configuration for Rackman app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "rackman"
    verbose_name = _("Rack Storage")
