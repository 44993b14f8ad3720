"""
App configuration for the audit trail.
"""

from django.apps import AppConfig


class AuditConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "audit"
    verbose_name = "Audit Trail"

    def ready(self):
        from django.contrib.auth import get_user_model

        from . import signals  # noqa: F401
        from .models import EntityType
        from .snapshots import model_fetcher, register

        register(EntityType.USER, model_fetcher(get_user_model()))
