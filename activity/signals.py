"""
Signal receivers feeding the activity timeline.
"""

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .recorder import log_user_registered


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def record_registration(sender, instance, created, raw=False, **kwargs):
    if created and not raw:
        log_user_registered(instance)
