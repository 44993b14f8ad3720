"""
Celery configuration for the Task Board project.
"""

import os
from datetime import timedelta

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings")

app = Celery("taskboard")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


@app.on_after_configure.connect
def setup_periodic_tasks(sender, **kwargs):
    """Register the beat schedule once Django settings are readable."""
    from django.conf import settings

    # Detect cards and subtasks that slipped past their due date
    sender.add_periodic_task(
        timedelta(hours=settings.OVERDUE_SWEEP_INTERVAL_HOURS),
        sender.signature("notifications.tasks.check_overdue_tasks"),
        name="check-overdue-tasks",
    )
