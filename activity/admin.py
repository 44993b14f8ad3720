"""
Admin configuration for the activity timeline.
"""

from django.contrib import admin

from .models import Activity


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ["timestamp", "user", "activity_type", "board", "description"]
    list_filter = ["activity_type", "entity_type", "timestamp"]
    search_fields = ["description", "user__username"]
    date_hierarchy = "timestamp"
    readonly_fields = [
        "user", "board", "activity_type", "entity_type", "entity_id",
        "description", "metadata", "timestamp",
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
