"""
App configuration for the activity timeline.
"""

from django.apps import AppConfig


class ActivityConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "activity"
    verbose_name = "Activity Timeline"

    def ready(self):
        from . import signals  # noqa: F401
