"""
In-app notifications.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone


class NotificationType(models.TextChoices):
    TASK_ASSIGNED = "task_assigned", "Task assigned"
    TASK_UNASSIGNED = "task_unassigned", "Task unassigned"
    TASK_COMPLETED = "task_completed", "Task completed"
    DEADLINE = "deadline", "Deadline"
    COMMENT = "comment", "Comment"
    MENTION = "mention", "Mention"
    INVITATION = "invitation", "Invitation"


class NotificationQuerySet(models.QuerySet):
    """
    Read-side queries and recipient-driven state changes.

    Reading and clearing only flip the ``read``/``deleted`` flags; rows are
    physically removed by ``hard_delete`` alone.
    """

    def visible(self):
        return self.filter(deleted=False)

    def unread(self):
        return self.visible().filter(read=False)

    def for_user(self, user):
        return self.filter(user=user)

    def mark_read(self, notification_id, user) -> int:
        return self.filter(pk=notification_id, user=user, deleted=False).update(read=True)

    def mark_all_read(self, user) -> int:
        return self.filter(user=user, read=False, deleted=False).update(read=True)

    def soft_delete(self, notification_id, user) -> int:
        return self.filter(pk=notification_id, user=user, deleted=False).update(deleted=True)

    def soft_delete_all(self, user) -> int:
        return self.filter(user=user, deleted=False).update(deleted=True)

    def hard_delete(self, notification_id, user) -> int:
        deleted, _ = self.filter(pk=notification_id, user=user).delete()
        return deleted

    def recent_deadline_exists(self, user_id, since, card_id=None, checklist_item_id=None) -> bool:
        """
        Whether ``user_id`` already got a deadline notice for this exact
        entity at or after ``since``.

        A card reference matches only card-level notices (no checklist item).
        """
        qs = self.filter(
            user_id=user_id,
            type=NotificationType.DEADLINE,
            created_at__gte=since,
        )
        if checklist_item_id is not None:
            qs = qs.filter(related_checklist_item_id=checklist_item_id)
        else:
            qs = qs.filter(related_card_id=card_id, related_checklist_item__isnull=True)
        return qs.exists()


class Notification(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    type = models.CharField(max_length=32, choices=NotificationType.choices)
    title = models.CharField(max_length=255)
    message = models.TextField()
    read = models.BooleanField(default=False)
    # Soft delete; hidden from default listings
    deleted = models.BooleanField(default=False)
    action_url = models.CharField(max_length=500, blank=True, default="")
    related_card = models.ForeignKey(
        "boards.Card",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )
    related_checklist_item = models.ForeignKey(
        "boards.ChecklistItem",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )
    from_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_notifications",
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        verbose_name = "notification"
        verbose_name_plural = "notifications"
        db_table = "notifications"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "read", "deleted"], name="notif_user_state_idx"),
            models.Index(fields=["user", "type", "created_at"], name="notif_user_type_ts_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.type} for {self.user_id}: {self.title}"
