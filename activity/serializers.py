"""
Serializers for the dashboard timeline.
"""

from rest_framework import serializers

from .models import Activity, ActivityEntityType, ActivityType


class ActivitySerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True)
    board_title = serializers.CharField(source="board.title", read_only=True, default=None)

    class Meta:
        model = Activity
        fields = [
            "id", "user", "username", "board", "board_title", "activity_type",
            "entity_type", "entity_id", "description", "metadata", "timestamp",
        ]
        read_only_fields = fields


class ActivityFilterSerializer(serializers.Serializer):
    """Validates the dashboard query string."""

    user = serializers.IntegerField(required=False, min_value=1)
    board = serializers.IntegerField(required=False, min_value=1)
    activity_type = serializers.ChoiceField(choices=ActivityType.choices, required=False)
    entity_type = serializers.ChoiceField(choices=ActivityEntityType.choices, required=False)
    since = serializers.DateTimeField(required=False)
    until = serializers.DateTimeField(required=False)


class ActivityPageSerializer(ActivityFilterSerializer):
    """Dashboard filters plus paging for the timeline list."""

    limit = serializers.IntegerField(required=False, min_value=1, max_value=500, default=50)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)
