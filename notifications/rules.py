"""
Who gets notified about task and subtask events, and with what wording.

Completion and overdue events fan out to the assignee, the board's owner and
admins, and the board creator, never to the user who acted. Assignment and
sweeper deadline notices go to a single recipient.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from boards.models import BoardMember, Card, CardMember, ChecklistItem
from core.context import display_name

from .models import Notification, NotificationType

logger = logging.getLogger(__name__)

TASK_COMPLETED = "task_completed"
SUBTASK_COMPLETED = "subtask_completed"
TASK_OVERDUE = "task_overdue"
SUBTASK_OVERDUE = "subtask_overdue"

COMPLETION_EVENTS = (TASK_COMPLETED, SUBTASK_COMPLETED)
OVERDUE_EVENTS = (TASK_OVERDUE, SUBTASK_OVERDUE)
TASK_EVENTS = COMPLETION_EVENTS + OVERDUE_EVENTS

# Used when a board has no title
DEFAULT_PROJECT_NAME = "Project"


@dataclass(frozen=True)
class TaskEventContext:
    actor_id: Optional[int]
    event: str
    card_id: Optional[int] = None
    checklist_item_id: Optional[int] = None
    board_id: Optional[int] = None


@dataclass(frozen=True)
class TaskTarget:
    """A card or checklist item with the board details wording needs."""

    title: str
    card_id: Optional[int]
    checklist_item_id: Optional[int]
    board_id: Optional[int]
    board_title: str
    board_owner_id: Optional[int]
    assignee_id: Optional[int]
    due_date: Optional[datetime] = None
    card_title: str = ""

    @property
    def is_subtask(self) -> bool:
        return self.checklist_item_id is not None

    @property
    def noun(self) -> str:
        return "subtask" if self.is_subtask else "task"


def _board_details(board):
    if board is None:
        return DEFAULT_PROJECT_NAME, None
    return board.title or DEFAULT_PROJECT_NAME, board.owner_id


def target_for_card(card: Card, board_id: Optional[int] = None) -> TaskTarget:
    """Describe a card; its assignee is the first member added."""
    board = card.list.board
    board_title, owner_id = _board_details(board)
    first_member = CardMember.objects.for_card(card.pk).first()
    return TaskTarget(
        title=card.title,
        card_id=card.pk,
        checklist_item_id=None,
        board_id=board_id or board.pk,
        board_title=board_title,
        board_owner_id=owner_id,
        assignee_id=first_member.user_id if first_member else None,
        due_date=card.due_date,
        card_title=card.title,
    )


def target_for_checklist_item(item: ChecklistItem, board_id: Optional[int] = None) -> TaskTarget:
    card = item.checklist.card
    board = card.list.board
    board_title, owner_id = _board_details(board)
    return TaskTarget(
        title=item.content,
        card_id=card.pk,
        checklist_item_id=item.pk,
        board_id=board_id or board.pk,
        board_title=board_title,
        board_owner_id=owner_id,
        assignee_id=item.assigned_to_id,
        due_date=item.due_date,
        card_title=card.title,
    )


def resolve_target(card_id=None, checklist_item_id=None, board_id=None) -> Optional[TaskTarget]:
    """Load the entity an event refers to; None when it no longer exists."""
    if checklist_item_id is not None:
        item = (
            ChecklistItem.objects.select_related("checklist__card__list__board")
            .filter(pk=checklist_item_id)
            .first()
        )
        return target_for_checklist_item(item, board_id) if item else None
    if card_id is not None:
        card = Card.objects.select_related("list__board").filter(pk=card_id).first()
        return target_for_card(card, board_id) if card else None
    return None


def resolve_recipients(target: TaskTarget, actor_id: Optional[int]) -> List[int]:
    """
    Assignee, board owners/admins and board creator, minus the actor.

    Each user appears once even when they qualify several ways.
    """
    candidates = []
    if target.assignee_id is not None:
        candidates.append(target.assignee_id)
    if target.board_id is not None:
        candidates.extend(
            BoardMember.objects.for_board(target.board_id)
            .managers()
            .order_by("id")
            .values_list("user_id", flat=True)
        )
    if target.board_owner_id is not None:
        candidates.append(target.board_owner_id)

    recipients = []
    for user_id in candidates:
        if user_id == actor_id or user_id in recipients:
            continue
        recipients.append(user_id)
    return recipients


def build_action_url(board_id, card_id, checklist_item_id=None) -> str:
    if card_id is None:
        return f"/boards/{board_id}" if board_id is not None else ""
    url = f"/boards/{board_id}/cards/{card_id}"
    if checklist_item_id is not None:
        url += f"?checklist_item={checklist_item_id}"
    return url


def compose_task_message(event: str, target: TaskTarget, actor_name: str, is_assignee: bool):
    """Return ``(type, title, message)`` for one recipient of a task event."""
    noun = target.noun
    project = target.board_title

    if event in COMPLETION_EVENTS:
        if is_assignee:
            title = f"{noun.capitalize()} completed"
            message = (
                f'Your {noun} "{target.title}" was marked complete by {actor_name} '
                f'in project "{project}".'
            )
        else:
            title = f"{noun.capitalize()} completed in project"
            message = (
                f'The {noun} "{target.title}" was marked complete by {actor_name} '
                f'in project "{project}".'
            )
        return NotificationType.TASK_COMPLETED, title, message

    if event in OVERDUE_EVENTS:
        if is_assignee:
            title = f"{noun.capitalize()} overdue"
            message = f'Your {noun} "{target.title}" is overdue in project "{project}".'
        else:
            title = f"{noun.capitalize()} overdue in project"
            message = f'The {noun} "{target.title}" is overdue in project "{project}".'
        return NotificationType.DEADLINE, title, message

    raise ValueError(f"Unknown task event: {event}")


def create_notification(**values) -> Optional[Notification]:
    """Write one notification. A failure is logged and returns None."""
    try:
        with transaction.atomic():
            return Notification.objects.create(**values)
    except Exception:
        logger.exception(
            "Failed to create %s notification for user %s",
            values.get("type"), values.get("user_id"),
        )
        return None


def _actor_name(actor_id) -> str:
    if actor_id is None:
        return "the system"
    actor = get_user_model().objects.filter(pk=actor_id).first()
    return display_name(actor)


def _fan_out(event, target: TaskTarget, actor_id, recipients: Iterable[int]) -> int:
    actor_name = _actor_name(actor_id)
    action_url = build_action_url(target.board_id, target.card_id, target.checklist_item_id)
    created = 0
    for user_id in recipients:
        notification_type, title, message = compose_task_message(
            event, target, actor_name, is_assignee=user_id == target.assignee_id
        )
        notification = create_notification(
            user_id=user_id,
            type=notification_type,
            title=title,
            message=message,
            action_url=action_url,
            related_card_id=target.card_id,
            related_checklist_item_id=target.checklist_item_id,
            from_user_id=actor_id if event in COMPLETION_EVENTS else None,
        )
        if notification is not None:
            created += 1
    return created


def notify_task_event(context: TaskEventContext) -> int:
    """
    Notify everyone concerned by a task or subtask event.

    Returns the number of notifications written.
    """
    if context.event not in TASK_EVENTS:
        raise ValueError(f"Unknown task event: {context.event}")

    try:
        target = resolve_target(context.card_id, context.checklist_item_id, context.board_id)
        if target is None:
            logger.info(
                "Skipping %s: card %s / item %s not found",
                context.event, context.card_id, context.checklist_item_id,
            )
            return 0
        recipients = resolve_recipients(target, context.actor_id)
    except Exception:
        logger.exception("Failed to resolve recipients for %s", context.event)
        return 0

    created = _fan_out(context.event, target, context.actor_id, recipients)
    logger.info(
        "Created %d notifications for %s on \"%s\"", created, context.event, target.title,
    )
    return created


def notify_assignment(actor_id, assignee_id, card_id=None, checklist_item_id=None,
                      assigned=True) -> Optional[Notification]:
    """Tell a user they were added to, or removed from, a card or subtask."""
    if assignee_id is None or assignee_id == actor_id:
        return None

    target = resolve_target(card_id, checklist_item_id)
    if target is None:
        return None

    actor_name = _actor_name(actor_id)
    if target.is_subtask:
        entity = f'subtask "{target.title}" on card "{target.card_title}"'
    else:
        entity = f'card "{target.title}"'
    if assigned:
        notification_type = NotificationType.TASK_ASSIGNED
        title = f"{target.noun.capitalize()} assigned"
        message = f"You were assigned to {entity} by {actor_name}."
    else:
        notification_type = NotificationType.TASK_UNASSIGNED
        title = f"{target.noun.capitalize()} unassigned"
        message = f"You were removed from {entity} by {actor_name}."

    return create_notification(
        user_id=assignee_id,
        type=notification_type,
        title=title,
        message=message,
        action_url=build_action_url(target.board_id, target.card_id, target.checklist_item_id),
        related_card_id=target.card_id,
        related_checklist_item_id=target.checklist_item_id,
        from_user_id=actor_id,
    )


def notify_deadline(recipient_id, target: TaskTarget, created_at=None) -> Optional[Notification]:
    """
    Single-recipient deadline notice used by the overdue sweeper.

    ``created_at`` defaults to now; the sweeper passes its own clock reading,
    which is also the time its dedup window is measured from.
    """
    event = SUBTASK_OVERDUE if target.is_subtask else TASK_OVERDUE
    notification_type, title, message = compose_task_message(
        event, target, actor_name="", is_assignee=True
    )
    if target.due_date is not None:
        message = f"{message[:-1]} (due {target.due_date:%Y-%m-%d})."

    return create_notification(
        user_id=recipient_id,
        type=notification_type,
        title=title,
        message=message,
        action_url=build_action_url(target.board_id, target.card_id, target.checklist_item_id),
        related_card_id=target.card_id,
        related_checklist_item_id=target.checklist_item_id,
        from_user_id=None,
        created_at=created_at or timezone.now(),
    )
