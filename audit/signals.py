"""
Session events recorded in the audit trail.
"""

from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.dispatch import receiver

from .utils import log_login, log_logout


@receiver(user_logged_in)
def audit_login(sender, request, user, **kwargs):
    log_login(user, request=request)


@receiver(user_logged_out)
def audit_logout(sender, request, user, **kwargs):
    # Anonymous sessions can be logged out too
    if user is None:
        return
    log_logout(user, request=request)
