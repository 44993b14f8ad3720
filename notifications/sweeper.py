"""
Overdue detection.

``OverdueSweeper.run()`` scans cards and checklist items past their due date
and sends each assignee one deadline notice per dedup window.
``SweeperWorker`` repeats the sweep on a fixed interval in a background
thread for deployments without Celery beat.
"""

import logging
import threading
from datetime import timedelta
from typing import Callable, Optional

from django.conf import settings
from django.db import close_old_connections
from django.utils import timezone

from audit.utils import log_system_operation
from boards.models import CardMember, ChecklistItem

from . import rules
from .models import Notification

logger = logging.getLogger(__name__)


def default_dedup_window() -> timedelta:
    return timedelta(hours=settings.OVERDUE_DEDUP_WINDOW_HOURS)


def default_interval() -> timedelta:
    return timedelta(hours=settings.OVERDUE_SWEEP_INTERVAL_HOURS)


class OverdueSweeper:
    """
    One sweep over overdue work.

    Safe to run repeatedly or concurrently: a recipient who already got a
    deadline notice for the same card or item inside the dedup window is
    skipped.
    """

    def __init__(
        self,
        clock: Callable = timezone.now,
        dedup_window: Optional[timedelta] = None,
        engine=None,
    ):
        self.clock = clock
        self.dedup_window = dedup_window if dedup_window is not None else default_dedup_window()
        self.engine = engine if engine is not None else rules

    def run(self) -> int:
        """Run one sweep and return the number of notifications created."""
        now = self.clock()
        since = now - self.dedup_window
        card_count = 0
        item_count = 0

        logger.info("Overdue sweep started at %s", now.isoformat())
        try:
            card_count = self._sweep_cards(now, since)
            item_count = self._sweep_checklist_items(now, since)
        except Exception:
            logger.exception("Overdue sweep aborted")

        total = card_count + item_count
        logger.info(
            "Overdue sweep finished: %d card + %d subtask notifications = %d",
            card_count, item_count, total,
        )
        log_system_operation(
            "overdue_sweep",
            {
                "card_notifications": card_count,
                "subtask_notifications": item_count,
                "notifications_created": total,
                "started_at": now.isoformat(),
            },
        )
        return total

    def _sweep_cards(self, now, since) -> int:
        created = 0
        memberships = list(CardMember.objects.overdue(now))
        logger.info("Found %d overdue card assignments", len(memberships))

        for membership in memberships:
            try:
                if Notification.objects.recent_deadline_exists(
                    membership.user_id, since, card_id=membership.card_id
                ):
                    logger.debug(
                        "Skipping duplicate: card %s for user %s",
                        membership.card_id, membership.user_id,
                    )
                    continue
                target = rules.target_for_card(membership.card)
                notification = self.engine.notify_deadline(membership.user_id, target, created_at=now)
                if notification is not None:
                    created += 1
            except Exception:
                logger.exception(
                    "Failed to process overdue card %s for user %s",
                    membership.card_id, membership.user_id,
                )
        return created

    def _sweep_checklist_items(self, now, since) -> int:
        created = 0
        items = list(ChecklistItem.objects.overdue(now))
        logger.info("Found %d overdue subtasks", len(items))

        for item in items:
            try:
                if Notification.objects.recent_deadline_exists(
                    item.assigned_to_id, since, checklist_item_id=item.pk
                ):
                    logger.debug(
                        "Skipping duplicate: subtask %s for user %s",
                        item.pk, item.assigned_to_id,
                    )
                    continue
                target = rules.target_for_checklist_item(item)
                notification = self.engine.notify_deadline(item.assigned_to_id, target, created_at=now)
                if notification is not None:
                    created += 1
            except Exception:
                logger.exception("Failed to process overdue subtask %s", item.pk)
        return created


class SweeperWorker:
    """
    Runs a sweeper every ``interval`` on a daemon thread.

    The first sweep happens one interval after ``start()``; call
    ``run_once()`` for an immediate one. ``stop()`` wakes the thread and
    waits for it to exit.
    """

    def __init__(self, sweeper: Optional[OverdueSweeper] = None, interval: Optional[timedelta] = None,
                 clock: Callable = timezone.now):
        self.clock = clock
        self.sweeper = sweeper if sweeper is not None else OverdueSweeper(clock=clock)
        self.interval = interval if interval is not None else default_interval()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.last_run_at = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="overdue-sweeper", daemon=True)
        self._thread.start()
        logger.info("Overdue sweeper started, interval %s", self.interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Overdue sweeper stopped")

    def run_once(self) -> int:
        """Run one sweep now; errors are logged and count as zero."""
        self.last_run_at = self.clock()
        try:
            return self.sweeper.run()
        except Exception:
            logger.exception("Overdue sweep failed")
            return 0

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until ``stop()`` is called; True if it was."""
        return self._stop_event.wait(timeout)

    def _loop(self) -> None:
        seconds = self.interval.total_seconds()
        while not self._stop_event.wait(seconds):
            close_old_connections()
            try:
                self.run_once()
            finally:
                close_old_connections()
