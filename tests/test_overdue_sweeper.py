"""
Tests for the overdue sweep, its background worker and its entry points.
"""

import threading
from datetime import timedelta
from io import StringIO
from unittest.mock import MagicMock

import pytest
from django.core.management import call_command
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from audit.models import AuditLog, EntityType
from boards.models import Card, CardMember
from notifications import rules
from notifications.models import Notification, NotificationType
from notifications.sweeper import OverdueSweeper, SweeperWorker
from notifications.tasks import check_overdue_tasks


@pytest.fixture
def overdue_card(board_setup, yesterday):
    """'Ship report', due yesterday and assigned to the assignee only."""
    card = Card.objects.create(title="Ship report", list=board_setup.todo, due_date=yesterday)
    CardMember.objects.create(card=card, user=board_setup.assignee)
    return card


@pytest.mark.django_db
class TestOverdueSweeper:
    def test_notifies_assignee_only(self, board_setup, overdue_card, yesterday):
        s = board_setup

        created = OverdueSweeper().run()

        assert created == 1
        notification = Notification.objects.get()
        assert notification.user == s.assignee
        assert notification.type == NotificationType.DEADLINE
        assert notification.title == "Task overdue"
        assert notification.message == (
            f'Your task "Ship report" is overdue in project "Launch" (due {yesterday:%Y-%m-%d}).'
        )
        assert notification.from_user is None
        assert notification.related_card == overdue_card
        assert notification.related_checklist_item is None

    def test_second_run_inside_window_creates_nothing(self, overdue_card):
        sweeper = OverdueSweeper()

        assert sweeper.run() == 1
        assert sweeper.run() == 0
        assert Notification.objects.count() == 1

    def test_runs_again_once_window_has_passed(self, overdue_card):
        assert OverdueSweeper().run() == 1

        later = timezone.now() + timedelta(hours=25)
        assert OverdueSweeper(clock=lambda: later).run() == 1
        assert Notification.objects.count() == 2

    def test_notice_is_stamped_with_sweeper_clock(self, overdue_card):
        later = timezone.now() + timedelta(hours=72)
        sweeper = OverdueSweeper(clock=lambda: later)

        assert sweeper.run() == 1
        assert Notification.objects.get().created_at == later
        assert sweeper.run() == 0

    def test_every_card_member_is_notified(self, board_setup, overdue_card):
        CardMember.objects.create(card=overdue_card, user=board_setup.admin)

        assert OverdueSweeper().run() == 2
        assert set(Notification.objects.values_list("user_id", flat=True)) == {
            board_setup.assignee.pk, board_setup.admin.pk,
        }

    def test_future_due_date_is_ignored(self, board_setup):
        card = Card.objects.create(
            title="Later", list=board_setup.todo, due_date=timezone.now() + timedelta(days=2),
        )
        CardMember.objects.create(card=card, user=board_setup.assignee)

        assert OverdueSweeper().run() == 0

    def test_overdue_subtask(self, board_setup, yesterday):
        s = board_setup
        s.item.due_date = yesterday
        s.item.save()

        assert OverdueSweeper().run() == 1

        notification = Notification.objects.get()
        assert notification.user == s.assignee
        assert notification.title == "Subtask overdue"
        assert notification.message.startswith('Your subtask "Draft outline" is overdue in project "Launch"')
        assert notification.related_checklist_item == s.item
        assert notification.action_url.endswith(f"?checklist_item={s.item.pk}")

    def test_unassigned_subtask_is_ignored(self, board_setup, yesterday):
        s = board_setup
        s.item.due_date = yesterday
        s.item.assigned_to = None
        s.item.save()

        assert OverdueSweeper().run() == 0

    def test_card_and_subtask_are_deduplicated_separately(self, board_setup, yesterday):
        s = board_setup
        s.card.due_date = yesterday
        s.card.save()
        s.item.due_date = yesterday
        s.item.save()
        sweeper = OverdueSweeper()

        assert sweeper.run() == 2
        assert sweeper.run() == 0

    def test_failed_row_does_not_stop_the_sweep(self, board_setup, overdue_card):
        CardMember.objects.create(card=overdue_card, user=board_setup.admin)
        engine = MagicMock()

        def notify_deadline(recipient_id, target, **kwargs):
            if recipient_id == board_setup.assignee.pk:
                raise RuntimeError("mail server down")
            return rules.notify_deadline(recipient_id, target, **kwargs)

        engine.notify_deadline.side_effect = notify_deadline

        assert OverdueSweeper(engine=engine).run() == 1
        assert Notification.objects.get().user == board_setup.admin

    def test_run_is_recorded_as_system_operation(self, overdue_card):
        OverdueSweeper().run()

        entry = AuditLog.objects.get(entity_type=EntityType.SYSTEM)
        assert entry.user is None
        assert entry.metadata["operation"] == "overdue_sweep"
        assert entry.metadata["details"]["notifications_created"] == 1
        assert entry.metadata["details"]["card_notifications"] == 1


class TestSweeperWorker:
    def test_run_once_returns_count(self):
        sweeper = MagicMock()
        sweeper.run.return_value = 4
        worker = SweeperWorker(sweeper=sweeper, interval=timedelta(hours=1))

        assert worker.run_once() == 4
        assert worker.last_run_at is not None

    def test_run_once_swallows_errors(self):
        sweeper = MagicMock()
        sweeper.run.side_effect = RuntimeError("boom")
        worker = SweeperWorker(sweeper=sweeper, interval=timedelta(hours=1))

        assert worker.run_once() == 0

    def test_start_sweeps_on_interval_until_stopped(self):
        ran = threading.Event()
        sweeper = MagicMock()
        sweeper.run.side_effect = lambda: ran.set() or 0
        worker = SweeperWorker(sweeper=sweeper, interval=timedelta(milliseconds=10))

        worker.start()
        try:
            assert ran.wait(timeout=5)
            assert worker.is_running
        finally:
            worker.stop(timeout=5)

        assert not worker.is_running

    def test_first_sweep_waits_one_interval(self):
        sweeper = MagicMock()
        worker = SweeperWorker(sweeper=sweeper, interval=timedelta(hours=1))

        worker.start()
        worker.stop(timeout=5)

        sweeper.run.assert_not_called()


# =============================================================================
# ENTRY POINTS
# =============================================================================

@pytest.mark.django_db
class TestSweepEntryPoints:
    def test_celery_task(self, overdue_card):
        result = check_overdue_tasks.apply()

        assert result.get() == 1
        assert Notification.objects.count() == 1

    def test_management_command(self, overdue_card):
        out = StringIO()

        call_command("check_overdue_tasks", stdout=out)

        assert "Created 1 deadline notifications" in out.getvalue()

    def test_management_command_dedup_window(self, overdue_card):
        call_command("check_overdue_tasks", stdout=StringIO())
        out = StringIO()

        call_command("check_overdue_tasks", "--dedup-hours", "0", stdout=out)

        assert "Created 1 deadline notifications" in out.getvalue()
        assert Notification.objects.count() == 2

    def test_api_trigger_for_staff(self, staff_client, overdue_card):
        response = staff_client.post(reverse("check_overdue_tasks"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"success": True, "notifications_created": 1}

    def test_api_trigger_requires_staff(self, api_client, board_setup, overdue_card):
        api_client.force_authenticate(user=board_setup.actor)

        response = api_client.post(reverse("check_overdue_tasks"))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Notification.objects.count() == 0
