"""
App configuration for notifications.
"""

from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"
    verbose_name = "Notifications"

    def ready(self):
        from audit.models import EntityType
        from audit.snapshots import model_fetcher, register

        from .models import Notification

        register(EntityType.NOTIFICATION, model_fetcher(Notification))
