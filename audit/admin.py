"""
Admin configuration for audit logs.
"""

from django.contrib import admin

from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ["timestamp", "action", "entity_type", "entity_id", "user", "ip_address"]
    list_filter = ["action", "entity_type", "timestamp"]
    search_fields = ["entity_id", "user__username", "user__email", "ip_address", "session_id"]
    date_hierarchy = "timestamp"
    readonly_fields = [
        "user", "session_id", "action", "entity_type", "entity_id", "ip_address",
        "user_agent", "old_data", "new_data", "metadata", "timestamp",
    ]

    # Audit rows are append-only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
