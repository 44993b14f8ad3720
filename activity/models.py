"""
Business activity timeline shown on the dashboard.
"""

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class ActivityType(models.TextChoices):
    BOARD_CREATED = "board_created", "Board created"
    BOARD_UPDATED = "board_updated", "Board updated"
    BOARD_DELETED = "board_deleted", "Board deleted"
    PORTFOLIO_CREATED = "portfolio_created", "Portfolio created"
    LIST_CREATED = "list_created", "List created"
    LIST_UPDATED = "list_updated", "List updated"
    LIST_DELETED = "list_deleted", "List deleted"
    CARD_CREATED = "card_created", "Card created"
    CARD_UPDATED = "card_updated", "Card updated"
    CARD_DELETED = "card_deleted", "Card deleted"
    CARD_MOVED = "card_moved", "Card moved"
    CARD_ASSIGNED = "card_assigned", "Card assigned"
    CHECKLIST_CREATED = "checklist_created", "Checklist created"
    CHECKLIST_COMPLETED = "checklist_completed", "Checklist completed"
    TASK_COMPLETED = "task_completed", "Task completed"
    TASK_ASSIGNED = "task_assigned", "Task assigned"
    SUBTASK_COMPLETED = "subtask_completed", "Subtask completed"
    SUBTASK_ASSIGNED = "subtask_assigned", "Subtask assigned"
    COMMENT_CREATED = "comment_created", "Comment created"
    MEMBER_INVITED = "member_invited", "Member invited"
    MEMBER_JOINED = "member_joined", "Member joined"
    MEMBER_REMOVED = "member_removed", "Member removed"
    USER_REGISTERED = "user_registered", "User registered"


class ActivityEntityType(models.TextChoices):
    BOARD = "board", "Board"
    LIST = "list", "List"
    CARD = "card", "Card"
    CHECKLIST = "checklist", "Checklist"
    CHECKLIST_ITEM = "checklist_item", "Checklist item"
    COMMENT = "comment", "Comment"
    USER = "user", "User"
    PORTFOLIO = "portfolio", "Portfolio"


class ActivityQuerySet(models.QuerySet):
    def filter_by(self, user=None, board=None, activity_type=None, entity_type=None,
                  since=None, until=None):
        """Dashboard filters; ``None`` leaves a dimension unfiltered."""
        qs = self
        if user is not None:
            qs = qs.filter(user_id=user)
        if board is not None:
            qs = qs.filter(board_id=board)
        if activity_type:
            qs = qs.filter(activity_type=activity_type)
        if entity_type:
            qs = qs.filter(entity_type=entity_type)
        if since is not None:
            qs = qs.filter(timestamp__gte=since)
        if until is not None:
            qs = qs.filter(timestamp__lte=until)
        return qs

    def count_by_type(self):
        """Return ``{activity_type: count}`` for the current queryset."""
        rows = (
            self.order_by()
            .values("activity_type")
            .annotate(total=models.Count("id"))
            .order_by("-total", "activity_type")
        )
        return {row["activity_type"]: row["total"] for row in rows}


class Activity(models.Model):
    """One entry on the business timeline; written once, never edited."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="activities",
    )
    board = models.ForeignKey(
        "boards.Board",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activities",
    )
    activity_type = models.CharField(max_length=40, choices=ActivityType.choices)
    entity_type = models.CharField(max_length=32, choices=ActivityEntityType.choices)
    entity_id = models.BigIntegerField(null=True, blank=True)
    # Rendered at write time with entity names embedded
    description = models.TextField()
    metadata = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = ActivityQuerySet.as_manager()

    class Meta:
        verbose_name = "activity"
        verbose_name_plural = "activities"
        db_table = "activities"
        ordering = ["-timestamp", "-id"]
        indexes = [
            models.Index(fields=["user", "timestamp"], name="activity_user_ts_idx"),
            models.Index(fields=["board", "timestamp"], name="activity_board_ts_idx"),
            models.Index(fields=["activity_type"], name="activity_type_idx"),
        ]

    def __str__(self) -> str:
        return self.description
