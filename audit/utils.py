"""
Helpers for writing audit log entries.

``log_event`` is the single persistence boundary: it normalises an entry and
hands ``persist_entry`` to the deferred dispatcher, so callers never wait on
the database and never see an audit failure.
"""

import logging
from typing import Optional

from django.utils import timezone

from core.context import DeliveryContext
from core.dispatch import dispatch
from core.security import redact_sensitive

from .models import AuditAction, AuditLog, EntityType

logger = logging.getLogger("audit")

# Actions that carry a before-image
BEFORE_IMAGE_ACTIONS = (AuditAction.UPDATE, AuditAction.DELETE)


def _resolve_context(context=None, request=None) -> DeliveryContext:
    if context is not None:
        return context
    if request is not None:
        return DeliveryContext.from_request(request)
    return DeliveryContext.system()


def build_entry(
    action: str,
    entity_type: str,
    entity_id=None,
    *,
    context: DeliveryContext,
    old_data=None,
    new_data=None,
    metadata: Optional[dict] = None,
) -> dict:
    """Return the field values of an audit row, with snapshots redacted."""
    if action not in BEFORE_IMAGE_ACTIONS:
        old_data = None
    if action == AuditAction.DELETE:
        new_data = None

    return {
        "user_id": context.actor_id,
        "session_id": context.session_id or "",
        "action": str(action),
        "entity_type": str(entity_type),
        "entity_id": str(entity_id) if entity_id is not None else None,
        "ip_address": context.ip_address or "",
        "user_agent": context.user_agent or "",
        "old_data": redact_sensitive(old_data),
        "new_data": redact_sensitive(new_data),
        "metadata": metadata or {},
    }


def persist_entry(entry: dict) -> Optional[AuditLog]:
    """Write one audit row. Failures are logged and the entry is dropped."""
    try:
        log = AuditLog.objects.create(**entry)
    except Exception:
        logger.exception(
            "Failed to persist audit entry %s %s:%s",
            entry.get("action"), entry.get("entity_type"), entry.get("entity_id"),
        )
        return None

    logger.debug(
        "%s %s %s by user %s",
        log.action, log.entity_type, log.entity_id or "", log.user_id or "anonymous",
    )
    return log


def log_event(
    action: str,
    entity_type: str,
    entity_id=None,
    *,
    context: Optional[DeliveryContext] = None,
    request=None,
    old_data=None,
    new_data=None,
    metadata: Optional[dict] = None,
) -> None:
    """Record an audit event without blocking the caller."""
    try:
        entry = build_entry(
            action,
            entity_type,
            entity_id,
            context=_resolve_context(context, request),
            old_data=old_data,
            new_data=new_data,
            metadata=metadata,
        )
    except Exception:
        logger.exception("Failed to build audit entry for %s %s", action, entity_type)
        return
    dispatch(persist_entry, entry)


def _metadata(context: DeliveryContext, **extra) -> dict:
    """Metadata every convenience constructor carries, plus its own keys."""
    data = {
        "actor_id": context.actor_id,
        "timestamp": timezone.now().isoformat(),
    }
    data.update(extra)
    return data


# =============================================================================
# CONVENIENCE CONSTRUCTORS
# =============================================================================

def log_login(user, request=None, method: str = "local") -> None:
    context = _resolve_context(request=request)
    context = DeliveryContext(user.pk, context.session_id, context.ip_address, context.user_agent)
    log_event(
        AuditAction.LOGIN, EntityType.SESSION, user.pk,
        context=context,
        metadata=_metadata(context, method=method),
    )


def log_logout(user, request=None) -> None:
    context = _resolve_context(request=request)
    context = DeliveryContext(user.pk, context.session_id, context.ip_address, context.user_agent)
    log_event(
        AuditAction.LOGOUT, EntityType.SESSION, user.pk,
        context=context,
        metadata=_metadata(context),
    )


def log_create(entity_type, entity_id, new_data, *, request=None, context=None) -> None:
    context = _resolve_context(context, request)
    log_event(
        AuditAction.CREATE, entity_type, entity_id,
        context=context,
        new_data=new_data,
        metadata=_metadata(context),
    )


def log_update(entity_type, entity_id, old_data, new_data, *, request=None, context=None) -> None:
    context = _resolve_context(context, request)
    changed = []
    if isinstance(old_data, dict) and isinstance(new_data, dict):
        changed = sorted(key for key, value in new_data.items() if old_data.get(key) != value)
    log_event(
        AuditAction.UPDATE, entity_type, entity_id,
        context=context,
        old_data=old_data,
        new_data=new_data,
        metadata=_metadata(context, changed_fields=changed),
    )


def log_delete(entity_type, entity_id, old_data, *, request=None, context=None) -> None:
    context = _resolve_context(context, request)
    log_event(
        AuditAction.DELETE, entity_type, entity_id,
        context=context,
        old_data=old_data,
        metadata=_metadata(context),
    )


def log_password_change(target_user_id, *, request=None, context=None) -> None:
    context = _resolve_context(context, request)
    log_event(
        AuditAction.PASSWORD_CHANGE, EntityType.USER, target_user_id,
        context=context,
        metadata=_metadata(
            context,
            changed_by=context.actor_id,
            target_user_id=target_user_id,
        ),
    )


def log_permission_change(target_user_id, old_role, new_role, *, board_id=None,
                          request=None, context=None) -> None:
    """Role changes keep both roles in metadata; the after-image holds the new one."""
    context = _resolve_context(context, request)
    log_event(
        AuditAction.PERMISSION_CHANGE, EntityType.USER, target_user_id,
        context=context,
        new_data={"role": new_role},
        metadata=_metadata(
            context,
            changed_by=context.actor_id,
            old_role=old_role,
            new_role=new_role,
            board_id=board_id,
        ),
    )


def log_assignment(entity_type, entity_id, assignee_id, *, request=None, context=None) -> None:
    context = _resolve_context(context, request)
    log_event(
        AuditAction.ASSIGN, entity_type, entity_id,
        context=context,
        new_data={"assignee_id": assignee_id},
        metadata=_metadata(context, assignee_id=assignee_id),
    )


def log_unassignment(entity_type, entity_id, assignee_id, *, request=None, context=None) -> None:
    context = _resolve_context(context, request)
    log_event(
        AuditAction.UNASSIGN, entity_type, entity_id,
        context=context,
        metadata=_metadata(context, assignee_id=assignee_id),
    )


def log_task_completion(entity_type, entity_id, completed: bool = True, *,
                        request=None, context=None) -> None:
    context = _resolve_context(context, request)
    log_event(
        AuditAction.COMPLETE if completed else AuditAction.UNCOMPLETE,
        entity_type, entity_id,
        context=context,
        new_data={"completed": completed},
        metadata=_metadata(context, completed=completed),
    )


def log_file_upload(entity_type, entity_id, filename, *, size=None, content_type="",
                    request=None, context=None) -> None:
    context = _resolve_context(context, request)
    log_event(
        AuditAction.UPLOAD, entity_type, entity_id,
        context=context,
        new_data={"filename": filename},
        metadata=_metadata(
            context,
            filename=filename,
            size=size,
            content_type=content_type,
        ),
    )


# Notification operations that hide or remove rows
NOTIFICATION_REMOVALS = ("delete", "clear_all", "hard_delete")


def log_notification_action(notification_id, operation, *, count=None,
                            request=None, context=None) -> None:
    """Record a recipient's read/delete operation on their notifications."""
    context = _resolve_context(context, request)
    action = AuditAction.DELETE if operation in NOTIFICATION_REMOVALS else AuditAction.UPDATE
    log_event(
        action, EntityType.NOTIFICATION, notification_id,
        context=context,
        metadata=_metadata(context, operation=operation, count=count),
    )


def log_system_operation(operation, details: Optional[dict] = None, *, context=None) -> None:
    """Record a job run by the system rather than a user (sweeps, maintenance)."""
    context = context or DeliveryContext.system()
    log_event(
        AuditAction.UPDATE, EntityType.SYSTEM, "system",
        context=context,
        metadata=_metadata(context, operation=operation, details=details or {}),
    )
