"""
Serializers for the audit viewer.
"""

from rest_framework import serializers

from .models import AuditAction, AuditLog, EntityType


class AuditLogSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = [
            "id", "user", "username", "session_id", "action", "entity_type",
            "entity_id", "ip_address", "user_agent", "old_data", "new_data",
            "metadata", "timestamp",
        ]
        read_only_fields = fields


class AuditLogFilterSerializer(serializers.Serializer):
    """Validates the audit viewer query string."""

    user = serializers.IntegerField(required=False, min_value=1)
    action = serializers.ChoiceField(choices=AuditAction.choices, required=False)
    entity_type = serializers.ChoiceField(choices=EntityType.choices, required=False)
    entity_id = serializers.CharField(required=False, max_length=100)
    since = serializers.DateTimeField(required=False)
    until = serializers.DateTimeField(required=False)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=500, default=50)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)

    def validate(self, attrs):
        since, until = attrs.get("since"), attrs.get("until")
        if since and until and since > until:
            raise serializers.ValidationError("'since' must not be after 'until'")
        return attrs
