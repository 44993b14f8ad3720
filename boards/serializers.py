"""
Serializers for the boards app.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Board, BoardList, BoardMember, BoardRole, Card, ChecklistItem, Comment

User = get_user_model()


class BoardSerializer(serializers.ModelSerializer):
    class Meta:
        model = Board
        fields = [
            "id", "title", "description", "color", "archived", "owner",
            "portfolio", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "owner", "created_at", "updated_at"]


class BoardMemberSerializer(serializers.ModelSerializer):
    user_id = serializers.PrimaryKeyRelatedField(
        source="user", queryset=User.objects.all()
    )
    username = serializers.CharField(source="user.username", read_only=True)
    role = serializers.ChoiceField(choices=BoardRole.choices, default=BoardRole.VIEWER)

    class Meta:
        model = BoardMember
        fields = ["id", "user_id", "username", "role", "created_at"]
        read_only_fields = ["id", "created_at"]

    def validate(self, attrs):
        board = self.context["board"]
        if BoardMember.objects.filter(board=board, user=attrs["user"]).exists():
            raise serializers.ValidationError({"user_id": "User is already a member of this board."})
        return attrs


class CardSerializer(serializers.ModelSerializer):
    board_id = serializers.IntegerField(source="list.board_id", read_only=True)
    member_ids = serializers.SerializerMethodField()

    class Meta:
        model = Card
        fields = [
            "id", "title", "description", "list", "board_id", "order", "due_date",
            "start_date", "end_date", "completed", "archived", "member_ids", "created_at",
        ]
        read_only_fields = ["id", "completed", "created_at"]

    def get_member_ids(self, obj):
        return list(obj.memberships.order_by("id").values_list("user_id", flat=True))

    def validate_list(self, value):
        # Cards only move between lists of the same board
        if self.instance is not None and value.board_id != self.instance.list.board_id:
            raise serializers.ValidationError("Cards cannot move to another board.")
        return value


class CardCompletionSerializer(serializers.Serializer):
    completed = serializers.BooleanField(required=False)


class CardMemberCreateSerializer(serializers.Serializer):
    user_id = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())


class ChecklistItemSerializer(serializers.ModelSerializer):
    card_id = serializers.IntegerField(source="checklist.card_id", read_only=True)

    class Meta:
        model = ChecklistItem
        fields = [
            "id", "content", "description", "checklist", "card_id", "order",
            "completed", "assigned_to", "due_date", "parent_item",
        ]
        read_only_fields = ["id", "checklist", "card_id"]


class CommentSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True)

    class Meta:
        model = Comment
        fields = ["id", "content", "card", "checklist_item", "user", "username", "created_at"]
        read_only_fields = ["id", "card", "user", "created_at"]

    def validate_checklist_item(self, value):
        card = self.context["card"]
        if value is not None and value.checklist.card_id != card.pk:
            raise serializers.ValidationError("Checklist item belongs to another card.")
        return value
