"""
Persistent audit log entries.
"""

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class AuditAction(models.TextChoices):
    CREATE = "CREATE", "Create"
    READ = "READ", "Read"
    UPDATE = "UPDATE", "Update"
    DELETE = "DELETE", "Delete"
    LOGIN = "LOGIN", "Login"
    LOGOUT = "LOGOUT", "Logout"
    ASSIGN = "ASSIGN", "Assign"
    UNASSIGN = "UNASSIGN", "Unassign"
    COMPLETE = "COMPLETE", "Complete"
    UNCOMPLETE = "UNCOMPLETE", "Uncomplete"
    PERMISSION_CHANGE = "PERMISSION_CHANGE", "Permission change"
    PASSWORD_CHANGE = "PASSWORD_CHANGE", "Password change"
    UPLOAD = "UPLOAD", "Upload"
    VIEW = "VIEW", "View"


class EntityType(models.TextChoices):
    USER = "user", "User"
    BOARD = "board", "Board"
    LIST = "list", "List"
    CARD = "card", "Card"
    CHECKLIST = "checklist", "Checklist"
    CHECKLIST_ITEM = "checklist_item", "Checklist item"
    COMMENT = "comment", "Comment"
    LABEL = "label", "Label"
    PORTFOLIO = "portfolio", "Portfolio"
    NOTIFICATION = "notification", "Notification"
    SESSION = "session", "Session"
    SYSTEM = "system", "System"


class AuditLogQuerySet(models.QuerySet):
    def filter_by(self, user=None, action=None, entity_type=None, entity_id=None,
                  since=None, until=None):
        """Apply the audit viewer filters; ``None`` means unfiltered."""
        qs = self
        if user is not None:
            qs = qs.filter(user_id=user)
        if action:
            qs = qs.filter(action=action)
        if entity_type:
            qs = qs.filter(entity_type=entity_type)
        if entity_id is not None:
            qs = qs.filter(entity_id=str(entity_id))
        if since is not None:
            qs = qs.filter(timestamp__gte=since)
        if until is not None:
            qs = qs.filter(timestamp__lte=until)
        return qs


class AuditLog(models.Model):
    """Append-only record of an operation on an entity."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs",
    )
    session_id = models.CharField(max_length=255, blank=True, default="")
    action = models.CharField(max_length=32, choices=AuditAction.choices)
    entity_type = models.CharField(max_length=32, choices=EntityType.choices)
    # String so non-numeric ids such as "system" fit
    entity_id = models.CharField(max_length=100, null=True, blank=True)
    ip_address = models.CharField(max_length=64, blank=True, default="")
    user_agent = models.TextField(blank=True, default="")
    old_data = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    new_data = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    metadata = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        verbose_name = "audit log"
        verbose_name_plural = "audit logs"
        db_table = "audit_logs"
        ordering = ["-timestamp", "-id"]
        indexes = [
            models.Index(fields=["action", "timestamp"], name="audit_action_ts_idx"),
            models.Index(fields=["entity_type", "entity_id"], name="audit_entity_idx"),
            models.Index(fields=["user", "timestamp"], name="audit_user_ts_idx"),
        ]

    def __str__(self) -> str:
        target = f"{self.entity_type}:{self.entity_id}" if self.entity_id else self.entity_type
        return f"{self.action} {target} ({self.timestamp:%Y-%m-%d %H:%M})"
