"""
Request-level audit trail.

Every successful state-changing API call (and GETs on a few important read
paths) is recorded without the views instrumenting themselves.
"""

import json
import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger("audit")

# HTTP method -> audit action for mutating requests
METHOD_ACTIONS = {
    "POST": "CREATE",
    "PUT": "UPDATE",
    "PATCH": "UPDATE",
    "DELETE": "DELETE",
}

# Actions for which the prior state is captured before the view runs
SNAPSHOT_ACTIONS = ("UPDATE", "DELETE")


def parse_response_body(response: HttpResponse):
    """
    Best-effort decode of a response body as JSON.

    Returns None for an empty body and a minimal status snapshot when the body
    is streamed or is not JSON.
    """
    fallback = {"status": "success", "status_code": response.status_code}
    if getattr(response, "streaming", False):
        return fallback

    content = response.content
    if not content:
        return None
    try:
        return json.loads(content)
    except (TypeError, ValueError):
        return fallback


class AuditMiddleware(MiddlewareMixin):
    """
    Audit successful API operations.

    Prior state for UPDATE/DELETE is fetched in ``process_request`` since the
    view may change or remove the row. The entry itself is built in
    ``process_response`` and handed to the deferred dispatcher.
    """

    def _action_for(self, request: HttpRequest) -> Optional[str]:
        path = request.path
        if self._is_skipped(path):
            return None

        if request.method in METHOD_ACTIONS:
            if path.startswith(settings.AUDIT_API_PREFIX):
                return METHOD_ACTIONS[request.method]
            return None

        if request.method == "GET" and any(
            path.startswith(prefix) for prefix in settings.AUDIT_IMPORTANT_READ_PATHS
        ):
            return "READ"
        return None

    @staticmethod
    def _is_skipped(path: str) -> bool:
        normalized = path.rstrip("/") or "/"
        return any(
            normalized == skip.rstrip("/") for skip in settings.AUDIT_SKIP_PATHS
        )

    def process_request(self, request: HttpRequest) -> None:
        request._audit_action = None
        try:
            action = self._action_for(request)
            if action is None:
                return

            from audit.resolver import resolve_entity
            from audit.snapshots import capture_snapshot

            reference = resolve_entity(request.path)
            request._audit_action = action
            request._audit_reference = reference
            request._audit_old_data = None
            if action in SNAPSHOT_ACTIONS and reference.entity_id is not None:
                request._audit_old_data = capture_snapshot(
                    reference.entity_type, reference.entity_id
                )
        except Exception:
            logger.exception("Failed to prepare audit capture for %s %s", request.method, request.path)
            request._audit_action = None

    def process_response(self, request: HttpRequest, response: HttpResponse) -> HttpResponse:
        action = getattr(request, "_audit_action", None)
        if action is None:
            return response
        if not 200 <= response.status_code < 300:
            return response

        try:
            self._record(request, response, action)
        except Exception:
            logger.exception("Failed to record audit entry for %s %s", request.method, request.path)
        return response

    def _record(self, request: HttpRequest, response: HttpResponse, action: str) -> None:
        from audit.utils import log_event
        from core.context import DeliveryContext

        reference = request._audit_reference
        new_data = None if action == "DELETE" else parse_response_body(response)

        log_event(
            action,
            reference.entity_type,
            reference.entity_id,
            context=DeliveryContext.from_request(request),
            old_data=request._audit_old_data,
            new_data=new_data,
            metadata={
                "method": request.method,
                "path": request.path,
                "status_code": response.status_code,
                "user_agent": request.META.get("HTTP_USER_AGENT", ""),
                "content_type": request.META.get("CONTENT_TYPE", ""),
                "sub_action": reference.sub_action,
            },
        )
