"""
Admin configuration for notifications app.

Notifications are created by the rule engine and the overdue sweeper, never by
hand. Staff can inspect them and hide or mark them read for support cases;
each such change is written to the audit trail.
"""

from django.contrib import admin

from audit.utils import log_notification_action
from core.context import DeliveryContext

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["created_at", "user", "type", "title", "read", "deleted", "from_user"]
    list_filter = ["type", "read", "deleted", "created_at"]
    search_fields = ["title", "message", "user__username"]
    date_hierarchy = "created_at"
    readonly_fields = [
        "user", "type", "title", "message", "read", "deleted", "action_url",
        "related_card", "related_checklist_item", "from_user", "created_at",
    ]
    actions = ["mark_selected_read", "hide_selected"]

    def has_add_permission(self, request):
        return False

    def _audit(self, request, ids, operation):
        context = DeliveryContext.from_request(request)
        for notification_id in ids:
            log_notification_action(notification_id, operation, context=context)

    @admin.action(description="Mark selected notifications as read")
    def mark_selected_read(self, request, queryset):
        ids = list(queryset.filter(read=False).values_list("id", flat=True))
        updated = Notification.objects.filter(id__in=ids).update(read=True)
        self._audit(request, ids, "read")
        self.message_user(request, f"{updated} notification(s) marked as read.")

    @admin.action(description="Hide selected notifications")
    def hide_selected(self, request, queryset):
        ids = list(queryset.filter(deleted=False).values_list("id", flat=True))
        updated = Notification.objects.filter(id__in=ids).update(deleted=True)
        self._audit(request, ids, "delete")
        self.message_user(request, f"{updated} notification(s) hidden.")
