"""
Celery tasks for notifications.
"""

import logging

from celery import shared_task

from .sweeper import OverdueSweeper

logger = logging.getLogger(__name__)


@shared_task(name="notifications.tasks.check_overdue_tasks")
def check_overdue_tasks():
    """
    Sweep for overdue cards and subtasks.

    Scheduled by Celery beat every OVERDUE_SWEEP_INTERVAL_HOURS and safe to
    trigger by hand: recipients already notified inside the dedup window are
    skipped.
    """
    created = OverdueSweeper().run()
    logger.info("check_overdue_tasks created %d notifications", created)
    return created

