"""
Task board domain: portfolios, boards, lists, cards and checklists.
"""

from django.conf import settings
from django.db import models


class Portfolio(models.Model):
    """A named group of boards."""

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    color = models.CharField(max_length=20, default="#3B82F6")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="portfolios",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "portfolios"

    def __str__(self) -> str:
        return self.name


class Board(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    color = models.CharField(max_length=20, default="#22C55E")
    archived = models.BooleanField(default=False)
    # Creator of the board
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="owned_boards",
    )
    portfolio = models.ForeignKey(
        Portfolio,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="boards",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "boards"

    def __str__(self) -> str:
        return self.title


class BoardRole(models.TextChoices):
    OWNER = "owner", "Owner"
    ADMIN = "admin", "Admin"
    EDITOR = "editor", "Editor"
    VIEWER = "viewer", "Viewer"


class BoardMemberQuerySet(models.QuerySet):
    def for_board(self, board_id):
        return self.filter(board_id=board_id).select_related("user")

    def managers(self):
        """Members whose role makes them responsible for the board."""
        return self.filter(role__in=[BoardRole.OWNER, BoardRole.ADMIN])


class BoardMember(models.Model):
    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name="memberships")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="board_memberships",
    )
    role = models.CharField(max_length=20, choices=BoardRole.choices, default=BoardRole.VIEWER)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = BoardMemberQuerySet.as_manager()

    class Meta:
        db_table = "board_members"
        constraints = [
            models.UniqueConstraint(fields=["board", "user"], name="unique_board_member"),
        ]

    def __str__(self) -> str:
        return f"{self.user} ({self.role}) on {self.board}"


class BoardList(models.Model):
    title = models.CharField(max_length=255)
    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name="lists")
    order = models.IntegerField(default=0)

    class Meta:
        db_table = "lists"
        ordering = ["order", "id"]

    def __str__(self) -> str:
        return self.title


class Card(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    list = models.ForeignKey(BoardList, on_delete=models.CASCADE, related_name="cards")
    order = models.IntegerField(default=0)
    due_date = models.DateTimeField(null=True, blank=True)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    completed = models.BooleanField(default=False)
    archived = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "cards"
        ordering = ["order", "id"]

    def __str__(self) -> str:
        return self.title

    @property
    def board_id(self):
        return self.list.board_id


class CardMemberQuerySet(models.QuerySet):
    def for_card(self, card_id):
        """Members of a card in the order they were added."""
        return self.filter(card_id=card_id).order_by("id")

    def overdue(self, now):
        """Memberships whose card has a due date before ``now``."""
        return (
            self.filter(card__due_date__isnull=False, card__due_date__lt=now)
            .select_related("card", "card__list", "card__list__board", "user")
            .order_by("card_id", "id")
        )


class CardMember(models.Model):
    card = models.ForeignKey(Card, on_delete=models.CASCADE, related_name="memberships")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="card_memberships",
    )

    objects = CardMemberQuerySet.as_manager()

    class Meta:
        db_table = "card_members"
        constraints = [
            models.UniqueConstraint(fields=["card", "user"], name="unique_card_member"),
        ]

    def __str__(self) -> str:
        return f"{self.user} on {self.card}"


class Checklist(models.Model):
    title = models.CharField(max_length=255)
    card = models.ForeignKey(Card, on_delete=models.CASCADE, related_name="checklists")
    order = models.IntegerField(default=0)

    class Meta:
        db_table = "checklists"
        ordering = ["order", "id"]

    def __str__(self) -> str:
        return self.title


class ChecklistItemQuerySet(models.QuerySet):
    def overdue(self, now):
        """Assigned items whose due date is before ``now``."""
        return (
            self.filter(
                due_date__isnull=False,
                due_date__lt=now,
                assigned_to__isnull=False,
            )
            .select_related("checklist__card__list__board", "assigned_to")
            .order_by("id")
        )


class ChecklistItem(models.Model):
    content = models.TextField()
    description = models.TextField(blank=True, default="")
    checklist = models.ForeignKey(Checklist, on_delete=models.CASCADE, related_name="items")
    order = models.IntegerField(default=0)
    completed = models.BooleanField(default=False)
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_checklist_items",
    )
    due_date = models.DateTimeField(null=True, blank=True)
    # Subtasks nest under a parent item
    parent_item = models.ForeignKey(
        "self",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="subitems",
    )

    objects = ChecklistItemQuerySet.as_manager()

    class Meta:
        db_table = "checklist_items"
        ordering = ["order", "id"]

    def __str__(self) -> str:
        return self.content[:50]

    @property
    def card(self):
        return self.checklist.card


class Comment(models.Model):
    content = models.TextField()
    card = models.ForeignKey(Card, on_delete=models.CASCADE, related_name="comments")
    checklist_item = models.ForeignKey(
        ChecklistItem,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="comments",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="comments",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "comments"
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return self.content[:50]


class Label(models.Model):
    name = models.CharField(max_length=100)
    color = models.CharField(max_length=20)
    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name="labels")
    cards = models.ManyToManyField(Card, blank=True, related_name="labels", db_table="card_labels")

    class Meta:
        db_table = "labels"

    def __str__(self) -> str:
        return self.name
