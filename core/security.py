"""
Request origin helpers and redaction of sensitive fields in audit snapshots.
"""

from typing import Any

# Placeholder written in place of redacted values
REDACTED = "[REDACTED]"

# Field names whose values must never reach the audit trail
SENSITIVE_FIELDS = frozenset({"password"})

# Upper bound for stored client agent strings
MAX_USER_AGENT_LENGTH = 500


# =============================================================================
# REQUEST ORIGIN
# =============================================================================

# Known private/internal IP ranges (for filtering X-Forwarded-For)
PRIVATE_IP_PREFIXES = (
    '10.',
    '172.16.', '172.17.', '172.18.', '172.19.',
    '172.20.', '172.21.', '172.22.', '172.23.',
    '172.24.', '172.25.', '172.26.', '172.27.',
    '172.28.', '172.29.', '172.30.', '172.31.',
    '192.168.',
    '127.',
    '::1',
    'fc00:',
    'fe80:',
)


def is_private_ip(ip: str) -> bool:
    """Check if an IP address is private/internal."""
    if not ip:
        return True
    ip_lower = ip.lower().strip()
    if ip_lower in ('localhost', '', 'unknown'):
        return True
    return any(ip_lower.startswith(prefix) for prefix in PRIVATE_IP_PREFIXES)


def get_client_ip(request) -> str:
    """
    Extract the origin address of a request, handling proxies.

    The first public address in X-Forwarded-For wins; at most 5 hops are
    considered. Falls back to REMOTE_ADDR.
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ips = [ip.strip() for ip in x_forwarded_for.split(',')][:5]

        for ip in ips:
            if ip and not is_private_ip(ip) and ('.' in ip or ':' in ip):
                return ip

        # All hops private: internal request
        if ips and ips[0]:
            return ips[0]

    return request.META.get('REMOTE_ADDR', 'unknown')


def get_user_agent(request) -> str:
    """Return the client agent string, truncated for storage."""
    return request.META.get('HTTP_USER_AGENT', '')[:MAX_USER_AGENT_LENGTH]


# =============================================================================
# REDACTION
# =============================================================================

def redact_sensitive(data: Any) -> Any:
    """
    Return a copy of ``data`` with every sensitive field replaced by REDACTED.

    Walks nested dicts and lists so a password embedded in a nested payload
    (e.g. ``{"user": {"password": ...}}``) is redacted as well. Values that
    are not containers are returned unchanged.
    """
    if isinstance(data, dict):
        return {
            key: REDACTED if key in SENSITIVE_FIELDS else redact_sensitive(value)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [redact_sensitive(item) for item in data]
    return data
