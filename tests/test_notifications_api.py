"""
Tests for the recipient-facing notification API.
"""

import pytest
from django.urls import reverse
from rest_framework import status

from audit.models import AuditAction, AuditLog, EntityType
from notifications.models import Notification, NotificationType


@pytest.fixture
def make_notification(user):
    def _make(recipient=None, **kwargs):
        kwargs.setdefault("type", NotificationType.TASK_ASSIGNED)
        kwargs.setdefault("title", "Task assigned")
        kwargs.setdefault("message", "You were assigned")
        return Notification.objects.create(user=recipient or user, **kwargs)
    return _make


@pytest.mark.django_db
class TestNotificationList:
    def test_lists_own_visible_notifications_newest_first(self, authenticated_client, make_notification,
                                                          create_user):
        first = make_notification(title="first")
        second = make_notification(title="second")
        make_notification(title="hidden", deleted=True)
        make_notification(recipient=create_user("other"), title="someone else's")

        response = authenticated_client.get(reverse("notifications_api:list"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 2
        assert [n["id"] for n in response.data["results"]] == [second.pk, first.pk]

    def test_unread_only(self, authenticated_client, make_notification):
        make_notification(read=True)
        unread = make_notification()

        response = authenticated_client.get(reverse("notifications_api:list"), {"unread_only": "true"})

        assert [n["id"] for n in response.data["results"]] == [unread.pk]

    def test_limit_and_offset(self, authenticated_client, make_notification):
        created = [make_notification(title=str(i)) for i in range(5)]

        response = authenticated_client.get(reverse("notifications_api:list"), {"limit": 2, "offset": 1})

        assert response.data["count"] == 5
        assert [n["id"] for n in response.data["results"]] == [created[3].pk, created[2].pk]

    def test_invalid_limit(self, authenticated_client):
        response = authenticated_client.get(reverse("notifications_api:list"), {"limit": 0})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse("notifications_api:list"))

        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)


@pytest.mark.django_db
class TestNotificationState:
    def test_unread_count(self, authenticated_client, make_notification):
        make_notification()
        make_notification()
        make_notification(read=True)
        make_notification(deleted=True)

        response = authenticated_client.get(reverse("notifications_api:unread-count"))

        assert response.data == {"count": 2}

    def test_mark_read(self, authenticated_client, make_notification):
        notification = make_notification()

        response = authenticated_client.post(reverse("notifications_api:read", args=[notification.pk]))

        assert response.status_code == status.HTTP_200_OK
        notification.refresh_from_db()
        assert notification.read is True

    def test_cannot_touch_another_users_notification(self, authenticated_client, make_notification,
                                                     create_user):
        foreign = make_notification(recipient=create_user("other"))

        read = authenticated_client.post(reverse("notifications_api:read", args=[foreign.pk]))
        delete = authenticated_client.delete(reverse("notifications_api:detail", args=[foreign.pk]))

        assert read.status_code == status.HTTP_404_NOT_FOUND
        assert read.data == {"error": "notification not found"}
        assert delete.status_code == status.HTTP_404_NOT_FOUND
        foreign.refresh_from_db()
        assert foreign.read is False
        assert foreign.deleted is False

    def test_mark_all_read(self, authenticated_client, make_notification):
        make_notification()
        make_notification()

        response = authenticated_client.post(reverse("notifications_api:mark-all-read"))

        assert response.data == {"success": True, "updated": 2}
        assert not Notification.objects.filter(read=False).exists()

    def test_delete_hides_row(self, authenticated_client, make_notification):
        notification = make_notification()

        response = authenticated_client.delete(reverse("notifications_api:detail", args=[notification.pk]))

        assert response.data == {"success": True, "permanent": False}
        notification.refresh_from_db()
        assert notification.deleted is True

    def test_permanent_delete_removes_row(self, authenticated_client, make_notification):
        notification = make_notification()

        response = authenticated_client.delete(
            reverse("notifications_api:detail", args=[notification.pk]) + "?permanent=true"
        )

        assert response.data == {"success": True, "permanent": True}
        assert not Notification.objects.filter(pk=notification.pk).exists()

    def test_clear_all(self, authenticated_client, make_notification):
        make_notification()
        make_notification(read=True)

        response = authenticated_client.post(reverse("notifications_api:clear-all"))

        assert response.data == {"success": True, "cleared": 2}
        assert Notification.objects.visible().count() == 0
        assert Notification.objects.count() == 2


@pytest.mark.django_db
class TestNotificationAdminActions:
    """Support actions in the Django admin are written to the audit trail."""

    def test_mark_selected_read(self, client, create_user, make_notification):
        admin_user = create_user("root", is_staff=True, is_superuser=True)
        client.force_login(admin_user)
        notification = make_notification()

        response = client.post(
            reverse("admin:notifications_notification_changelist"),
            {"action": "mark_selected_read", "_selected_action": [notification.pk]},
        )

        assert response.status_code == 302
        notification.refresh_from_db()
        assert notification.read is True
        entry = AuditLog.objects.get(entity_type=EntityType.NOTIFICATION)
        assert entry.action == AuditAction.UPDATE
        assert entry.entity_id == str(notification.pk)
        assert entry.user == admin_user
        assert entry.metadata["operation"] == "read"

    def test_hide_selected(self, client, create_user, make_notification):
        client.force_login(create_user("root", is_staff=True, is_superuser=True))
        notification = make_notification()

        client.post(
            reverse("admin:notifications_notification_changelist"),
            {"action": "hide_selected", "_selected_action": [notification.pk]},
        )

        notification.refresh_from_db()
        assert notification.deleted is True
        entry = AuditLog.objects.get(entity_type=EntityType.NOTIFICATION)
        assert entry.action == AuditAction.DELETE
