"""
Tests for the audit writer and its convenience constructors.
"""

from unittest.mock import patch

import pytest
from django.test import Client
from django.urls import reverse
from rest_framework import status

from audit import utils as audit_utils
from audit.models import AuditAction, AuditLog, EntityType
from core.context import DeliveryContext
from core.security import REDACTED


@pytest.fixture
def context(user):
    return DeliveryContext(actor_id=user.pk, session_id="sess-1", ip_address="198.51.100.7",
                           user_agent="pytest")


@pytest.mark.django_db
class TestLogEvent:
    """The single write path."""

    def test_writes_entry_with_context(self, context, user):
        audit_utils.log_event(
            AuditAction.CREATE, EntityType.BOARD, 7,
            context=context,
            new_data={"title": "Launch"},
            metadata={"source": "test"},
        )

        entry = AuditLog.objects.get()
        assert entry.user == user
        assert entry.session_id == "sess-1"
        assert entry.ip_address == "198.51.100.7"
        assert entry.user_agent == "pytest"
        assert entry.entity_type == "board"
        assert entry.entity_id == "7"
        assert entry.new_data == {"title": "Launch"}
        assert entry.metadata == {"source": "test"}

    def test_create_never_carries_before_image(self, context):
        audit_utils.log_event(
            AuditAction.CREATE, EntityType.CARD, 1,
            context=context,
            old_data={"title": "ignored"},
            new_data={"title": "kept"},
        )

        entry = AuditLog.objects.get()
        assert entry.old_data is None
        assert entry.new_data == {"title": "kept"}

    def test_delete_never_carries_after_image(self, context):
        audit_utils.log_event(
            AuditAction.DELETE, EntityType.CARD, 1,
            context=context,
            old_data={"title": "gone"},
            new_data={"title": "ignored"},
        )

        entry = AuditLog.objects.get()
        assert entry.old_data == {"title": "gone"}
        assert entry.new_data is None

    def test_snapshots_are_redacted(self, context):
        audit_utils.log_event(
            AuditAction.UPDATE, EntityType.USER, 1,
            context=context,
            old_data={"password": "old-secret", "username": "a"},
            new_data={"nested": [{"password": "new-secret"}]},
        )

        entry = AuditLog.objects.get()
        assert entry.old_data == {"password": REDACTED, "username": "a"}
        assert entry.new_data == {"nested": [{"password": REDACTED}]}

    def test_without_context_or_request_is_system(self):
        audit_utils.log_event(AuditAction.READ, EntityType.SYSTEM, "system")

        entry = AuditLog.objects.get()
        assert entry.user is None
        assert entry.user_agent == "system"

    def test_persistence_failure_is_logged_not_raised(self, context):
        with patch.object(AuditLog.objects, "create", side_effect=RuntimeError("db down")), \
                patch.object(audit_utils.logger, "exception") as mock_log:
            audit_utils.log_event(AuditAction.CREATE, EntityType.BOARD, 1, context=context)

        assert AuditLog.objects.count() == 0
        mock_log.assert_called_once()
        assert "Failed to persist audit entry" in mock_log.call_args.args[0]

    def test_submits_to_dispatcher(self, context):
        with patch("audit.utils.dispatch") as mock_dispatch:
            audit_utils.log_event(AuditAction.CREATE, EntityType.BOARD, 1, context=context)

        func, entry = mock_dispatch.call_args.args
        assert func is audit_utils.persist_entry
        assert entry["action"] == "CREATE"
        assert AuditLog.objects.count() == 0


@pytest.mark.django_db
class TestConvenienceConstructors:
    """Each constructor fixes the action and the metadata keys it adds."""

    def test_password_change(self, context, user):
        audit_utils.log_password_change(42, context=context)

        entry = AuditLog.objects.get()
        assert entry.action == AuditAction.PASSWORD_CHANGE
        assert entry.entity_type == EntityType.USER
        assert entry.entity_id == "42"
        assert entry.metadata["changed_by"] == user.pk
        assert entry.metadata["target_user_id"] == 42
        assert entry.metadata["actor_id"] == user.pk
        assert "timestamp" in entry.metadata

    def test_permission_change_keeps_both_roles(self, context):
        audit_utils.log_permission_change(42, "viewer", "admin", board_id=3, context=context)

        entry = AuditLog.objects.get()
        assert entry.action == AuditAction.PERMISSION_CHANGE
        assert entry.new_data == {"role": "admin"}
        assert entry.old_data is None
        assert entry.metadata["old_role"] == "viewer"
        assert entry.metadata["new_role"] == "admin"
        assert entry.metadata["board_id"] == 3

    def test_update_lists_changed_fields(self, context):
        audit_utils.log_update(
            EntityType.CARD, 5,
            {"title": "a", "order": 1},
            {"title": "b", "order": 1},
            context=context,
        )

        entry = AuditLog.objects.get()
        assert entry.action == AuditAction.UPDATE
        assert entry.metadata["changed_fields"] == ["title"]
        assert entry.old_data == {"title": "a", "order": 1}

    def test_create_and_delete(self, context):
        audit_utils.log_create(EntityType.LABEL, 1, {"name": "bug"}, context=context)
        audit_utils.log_delete(EntityType.LABEL, 1, {"name": "bug"}, context=context)

        created, deleted = AuditLog.objects.order_by("id")
        assert created.action == AuditAction.CREATE
        assert created.new_data == {"name": "bug"}
        assert deleted.action == AuditAction.DELETE
        assert deleted.old_data == {"name": "bug"}
        assert deleted.new_data is None

    def test_assignment_and_unassignment(self, context):
        audit_utils.log_assignment(EntityType.CARD, 9, 11, context=context)
        audit_utils.log_unassignment(EntityType.CARD, 9, 11, context=context)

        assigned, unassigned = AuditLog.objects.order_by("id")
        assert assigned.action == AuditAction.ASSIGN
        assert assigned.metadata["assignee_id"] == 11
        assert unassigned.action == AuditAction.UNASSIGN
        assert unassigned.metadata["assignee_id"] == 11

    def test_task_completion_toggle(self, context):
        audit_utils.log_task_completion(EntityType.CARD, 9, context=context)
        audit_utils.log_task_completion(EntityType.CARD, 9, completed=False, context=context)

        actions = list(AuditLog.objects.order_by("id").values_list("action", flat=True))
        assert actions == [AuditAction.COMPLETE, AuditAction.UNCOMPLETE]

    def test_file_upload(self, context):
        audit_utils.log_file_upload(
            EntityType.CARD, 9, "spec.pdf", size=2048, content_type="application/pdf",
            context=context,
        )

        entry = AuditLog.objects.get()
        assert entry.action == AuditAction.UPLOAD
        assert entry.metadata["filename"] == "spec.pdf"
        assert entry.metadata["size"] == 2048
        assert entry.metadata["content_type"] == "application/pdf"

    @pytest.mark.parametrize("operation, action", [
        ("read", AuditAction.UPDATE),
        ("mark_all_read", AuditAction.UPDATE),
        ("delete", AuditAction.DELETE),
        ("clear_all", AuditAction.DELETE),
    ])
    def test_notification_action(self, context, operation, action):
        audit_utils.log_notification_action(3, operation, count=2, context=context)

        entry = AuditLog.objects.get()
        assert entry.action == action
        assert entry.entity_type == EntityType.NOTIFICATION
        assert entry.metadata["operation"] == operation
        assert entry.metadata["count"] == 2

    def test_system_operation(self):
        audit_utils.log_system_operation("overdue_sweep", {"notifications_created": 3})

        entry = AuditLog.objects.get()
        assert entry.user is None
        assert entry.entity_type == EntityType.SYSTEM
        assert entry.entity_id == "system"
        assert entry.metadata["operation"] == "overdue_sweep"
        assert entry.metadata["details"] == {"notifications_created": 3}


@pytest.mark.django_db
class TestSessionSignals:
    def test_login_and_logout_are_recorded(self, create_user):
        user = create_user("frank", password="SecurePass123!@#")
        client = Client()

        assert client.login(username="frank", password="SecurePass123!@#")
        client.logout()

        login, logout = AuditLog.objects.order_by("id")
        assert login.action == AuditAction.LOGIN
        assert login.entity_type == EntityType.SESSION
        assert login.entity_id == str(user.pk)
        assert login.user == user
        assert login.metadata["method"] == "local"
        assert logout.action == AuditAction.LOGOUT
        assert logout.user == user

    def test_failed_login_is_not_recorded(self, create_user):
        create_user("frank", password="SecurePass123!@#")

        assert not Client().login(username="frank", password="wrong")
        assert AuditLog.objects.count() == 0


@pytest.mark.django_db
class TestAuditLogEndpoint:
    """Staff-only audit viewer."""

    @pytest.fixture
    def entries(self, context):
        audit_utils.log_create(EntityType.BOARD, 1, {"title": "a"}, context=context)
        audit_utils.log_create(EntityType.CARD, 2, {"title": "b"}, context=context)
        audit_utils.log_delete(EntityType.CARD, 2, {"title": "b"}, context=context)

    def test_filters_by_entity(self, staff_client, entries):
        response = staff_client.get(
            reverse("audit_api:audit-logs"), {"entity_type": "card", "entity_id": "2"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 2
        assert [r["action"] for r in response.data["results"]] == ["DELETE", "CREATE"]

    def test_limit_and_offset(self, staff_client, entries):
        response = staff_client.get(reverse("audit_api:audit-logs"), {"limit": 1, "offset": 1})

        assert response.data["limit"] == 1
        assert response.data["offset"] == 1
        assert [r["entity_type"] for r in response.data["results"]] == ["card"]

    def test_since_after_until_is_rejected(self, staff_client):
        response = staff_client.get(
            reverse("audit_api:audit-logs"),
            {"since": "2024-02-01T00:00:00Z", "until": "2024-01-01T00:00:00Z"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_viewing_is_itself_audited(self, staff_client, staff_user):
        staff_client.get(reverse("audit_api:audit-logs"))

        entry = AuditLog.objects.get()
        assert entry.action == AuditAction.READ
        assert entry.user == staff_user

    def test_non_staff_forbidden(self, authenticated_client):
        response = authenticated_client.get(reverse("audit_api:audit-logs"))

        assert response.status_code == status.HTTP_403_FORBIDDEN
