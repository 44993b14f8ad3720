"""
Task Board project package.

Loads the Celery app with Django so ``shared_task`` binds to it, and tunes
SQLite connections for the deferred writer threads.
"""

from django.db.backends.signals import connection_created
from django.dispatch import receiver

from .celery import app as celery_app

__all__ = ("celery_app",)

# Audit, activity and notification rows are written from worker threads
SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL;",
    "PRAGMA synchronous=NORMAL;",
    "PRAGMA busy_timeout=30000;",
)


@receiver(connection_created)
def configure_sqlite(sender, connection, **kwargs):
    if connection.vendor != "sqlite":
        return
    with connection.cursor() as cursor:
        for pragma in SQLITE_PRAGMAS:
            cursor.execute(pragma)
