"""
Serializers for the notifications app.
"""

from rest_framework import serializers

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    from_username = serializers.CharField(source="from_user.username", read_only=True, default=None)

    class Meta:
        model = Notification
        fields = [
            "id", "type", "title", "message", "read", "action_url",
            "related_card", "related_checklist_item", "from_user",
            "from_username", "created_at",
        ]
        read_only_fields = fields


class NotificationListParamsSerializer(serializers.Serializer):
    """Query string of the notification list."""

    unread_only = serializers.BooleanField(required=False, default=False)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)
