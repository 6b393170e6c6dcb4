"""Django app configuration for status app."""

from django.apps import AppConfig


class StatusConfig(AppConfig):
    """Configuration for status app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.status'
    verbose_name = 'Status'
