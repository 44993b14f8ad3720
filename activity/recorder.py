"""
Business timeline recorder.

Each helper renders a description with entity names embedded, then hands the
write to the deferred dispatcher. Nothing raised here reaches the business
operation that triggered it.
"""

import functools
import logging
from typing import Optional

from django.utils import timezone

from core.context import display_name
from core.dispatch import dispatch

from .models import Activity, ActivityEntityType, ActivityType

logger = logging.getLogger(__name__)

# Comment excerpts in descriptions are cut to this length
COMMENT_EXCERPT_LENGTH = 50


def never_raises(func):
    """Log and swallow any error from a recorder helper."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception("Failed to record activity via %s", func.__name__)
            return None

    return wrapper


def persist_activity(values: dict) -> Optional[Activity]:
    try:
        activity = Activity.objects.create(**values)
    except Exception:
        logger.exception(
            "Failed to persist activity %s for user %s",
            values.get("activity_type"), values.get("user_id"),
        )
        return None
    logger.debug("[%s] %s", activity.activity_type, activity.description)
    return activity


@never_raises
def log_activity(
    user_id: int,
    activity_type: str,
    entity_type: str,
    entity_id: Optional[int] = None,
    *,
    description: str,
    board_id: Optional[int] = None,
    metadata: Optional[dict] = None,
) -> None:
    """Queue one timeline entry for the acting user."""
    if user_id is None:
        raise ValueError("activity entries require an acting user")
    dispatch(persist_activity, {
        "user_id": user_id,
        "board_id": board_id,
        "activity_type": str(activity_type),
        "entity_type": str(entity_type),
        "entity_id": entity_id,
        "description": description,
        "metadata": metadata or {},
    })


def _now() -> str:
    return timezone.now().isoformat()


# =============================================================================
# BOARDS
# =============================================================================

@never_raises
def log_board_created(user_id, board) -> None:
    log_activity(
        user_id, ActivityType.BOARD_CREATED, ActivityEntityType.BOARD, board.pk,
        board_id=board.pk,
        description=f'Created board "{board.title}"',
        metadata={"board_title": board.title, "created_at": _now()},
    )


@never_raises
def log_board_updated(user_id, board, changes: Optional[dict] = None) -> None:
    log_activity(
        user_id, ActivityType.BOARD_UPDATED, ActivityEntityType.BOARD, board.pk,
        board_id=board.pk,
        description=f'Updated board "{board.title}"',
        metadata={"board_title": board.title, "changes": changes or {}, "updated_at": _now()},
    )


# =============================================================================
# CARDS
# =============================================================================

@never_raises
def log_card_created(user_id, card) -> None:
    log_activity(
        user_id, ActivityType.CARD_CREATED, ActivityEntityType.CARD, card.pk,
        board_id=card.list.board_id,
        description=f'Created card "{card.title}"',
        metadata={"card_title": card.title, "created_at": _now()},
    )


@never_raises
def log_card_moved(user_id, card, from_list, to_list) -> None:
    log_activity(
        user_id, ActivityType.CARD_MOVED, ActivityEntityType.CARD, card.pk,
        board_id=to_list.board_id,
        description=f'Moved "{card.title}" from "{from_list.title}" to "{to_list.title}"',
        metadata={
            "card_title": card.title,
            "from_list": from_list.title,
            "to_list": to_list.title,
            "moved_at": _now(),
        },
    )


@never_raises
def log_card_assigned(user_id, card, assignee) -> None:
    assignee_name = display_name(assignee)
    log_activity(
        user_id, ActivityType.CARD_ASSIGNED, ActivityEntityType.CARD, card.pk,
        board_id=card.list.board_id,
        description=f'Assigned card "{card.title}" to {assignee_name}',
        metadata={
            "card_title": card.title,
            "assigned_to_user_id": assignee.pk,
            "assigned_to_username": assignee_name,
            "assigned_at": _now(),
        },
    )


# =============================================================================
# CHECKLISTS
# =============================================================================

@never_raises
def log_checklist_completed(user_id, checklist) -> None:
    log_activity(
        user_id, ActivityType.CHECKLIST_COMPLETED, ActivityEntityType.CHECKLIST, checklist.pk,
        board_id=checklist.card.list.board_id,
        description=f'Completed checklist "{checklist.title}"',
        metadata={"checklist_title": checklist.title, "completed_at": _now()},
    )


@never_raises
def log_task_completed(user_id, card) -> None:
    log_activity(
        user_id, ActivityType.TASK_COMPLETED, ActivityEntityType.CARD, card.pk,
        board_id=card.list.board_id,
        description=f'Completed task "{card.title}"',
        metadata={"task_title": card.title, "completed_at": _now()},
    )


@never_raises
def log_subtask_completed(user_id, item) -> None:
    if item.parent_item_id is not None:
        parent_title = item.parent_item.content
    else:
        parent_title = item.checklist.card.title
    log_activity(
        user_id, ActivityType.SUBTASK_COMPLETED, ActivityEntityType.CHECKLIST_ITEM, item.pk,
        board_id=item.checklist.card.list.board_id,
        description=f'Completed subtask "{item.content}" in "{parent_title}"',
        metadata={
            "subtask_title": item.content,
            "parent_task_title": parent_title,
            "completed_at": _now(),
        },
    )


# =============================================================================
# MEMBERS, COMMENTS, USERS
# =============================================================================

@never_raises
def log_member_invited(user_id, board, invited_user) -> None:
    invited_name = display_name(invited_user)
    log_activity(
        user_id, ActivityType.MEMBER_INVITED, ActivityEntityType.USER, invited_user.pk,
        board_id=board.pk,
        description=f'Invited {invited_name} to project "{board.title}"',
        metadata={"invited_username": invited_name, "invited_at": _now()},
    )


@never_raises
def log_comment_created(user_id, comment) -> None:
    content = comment.content
    excerpt = content
    if len(content) > COMMENT_EXCERPT_LENGTH:
        excerpt = content[:COMMENT_EXCERPT_LENGTH] + "..."
    log_activity(
        user_id, ActivityType.COMMENT_CREATED, ActivityEntityType.COMMENT, comment.pk,
        board_id=comment.card.list.board_id,
        description=f'Commented: "{excerpt}"',
        metadata={"full_content": content, "card_id": comment.card_id, "commented_at": _now()},
    )


@never_raises
def log_user_registered(user) -> None:
    name = display_name(user)
    log_activity(
        user.pk, ActivityType.USER_REGISTERED, ActivityEntityType.USER, user.pk,
        description=f"User {name} registered",
        metadata={"username": user.get_username(), "registered_at": _now()},
    )
