"""
Who did something, from where: threaded through audit and notification writes.
"""

from dataclasses import dataclass
from typing import Optional

from .security import get_client_ip, get_user_agent


@dataclass(frozen=True)
class DeliveryContext:
    """Acting user, session and client origin of an operation."""

    actor_id: Optional[int] = None
    session_id: str = ""
    ip_address: str = ""
    user_agent: str = ""

    @classmethod
    def from_request(cls, request, actor_id: Optional[int] = None) -> "DeliveryContext":
        """Build a context from a Django request.

        ``actor_id`` overrides the authenticated user, e.g. right after login
        when the request user is about to change.
        """
        if actor_id is None:
            user = getattr(request, "user", None)
            if user is not None and user.is_authenticated:
                actor_id = user.pk

        session = getattr(request, "session", None)
        session_id = getattr(session, "session_key", None) or ""

        return cls(
            actor_id=actor_id,
            session_id=session_id,
            ip_address=get_client_ip(request),
            user_agent=get_user_agent(request),
        )

    @classmethod
    def system(cls) -> "DeliveryContext":
        """Context for scheduled jobs that run without a request."""
        return cls(user_agent="system")


def display_name(user) -> str:
    """Name shown for a user in notifications and timeline entries."""
    if user is None:
        return "Someone"
    return user.get_full_name() or user.get_username()
