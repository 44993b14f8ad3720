"""
API views for the boards app.

Only the operations that feed the activity timeline and the notification
rules live here. Every mutating call is also audited by AuditMiddleware.
"""

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from activity import recorder
from core.dispatch import dispatch
from notifications.rules import (
    SUBTASK_COMPLETED,
    TASK_COMPLETED,
    TaskEventContext,
    notify_assignment,
    notify_task_event,
)

from .models import Board, BoardMember, BoardRole, Card, CardMember, ChecklistItem
from .serializers import (
    BoardMemberSerializer,
    BoardSerializer,
    CardCompletionSerializer,
    CardMemberCreateSerializer,
    CardSerializer,
    ChecklistItemSerializer,
    CommentSerializer,
)


def accessible_boards(user):
    """Boards the user owns or belongs to; staff see every board."""
    if user.is_staff:
        return Board.objects.all()
    return Board.objects.filter(Q(owner=user) | Q(memberships__user=user)).distinct()


def accessible_cards(user):
    return Card.objects.select_related("list__board").filter(
        list__board__in=accessible_boards(user)
    )


def can_manage(board, user) -> bool:
    """Owner, board owners/admins and staff may manage a board."""
    if user.is_staff or board.owner_id == user.pk:
        return True
    return BoardMember.objects.for_board(board.pk).managers().filter(user=user).exists()


# =============================================================================
# BOARDS
# =============================================================================

class BoardListCreateView(generics.ListCreateAPIView):
    serializer_class = BoardSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return accessible_boards(self.request.user).order_by("-created_at")

    def perform_create(self, serializer):
        user = self.request.user
        board = serializer.save(owner=user)
        BoardMember.objects.create(board=board, user=user, role=BoardRole.OWNER)
        recorder.log_board_created(user.pk, board)


class BoardDetailView(generics.RetrieveUpdateDestroyAPIView):
    serializer_class = BoardSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return accessible_boards(self.request.user)

    def perform_update(self, serializer):
        instance = serializer.instance
        before = {field: getattr(instance, field) for field in serializer.validated_data}
        board = serializer.save()
        changes = {
            field: serializer.data[field]
            for field, value in before.items()
            if getattr(board, field) != value
        }
        recorder.log_board_updated(self.request.user.pk, board, changes)

    def perform_destroy(self, instance):
        if not can_manage(instance, self.request.user):
            raise PermissionDenied("Only board owners and admins can delete a board.")
        instance.delete()


class BoardMemberListView(APIView):
    """List or invite members of a board."""

    permission_classes = [permissions.IsAuthenticated]

    def get_board(self, pk):
        return get_object_or_404(accessible_boards(self.request.user), pk=pk)

    def get(self, request, pk):
        board = self.get_board(pk)
        members = BoardMember.objects.for_board(board.pk).order_by("id")
        return Response(BoardMemberSerializer(members, many=True).data)

    def post(self, request, pk):
        board = self.get_board(pk)
        if not can_manage(board, request.user):
            raise PermissionDenied("Only board owners and admins can invite members.")

        serializer = BoardMemberSerializer(data=request.data, context={"board": board})
        serializer.is_valid(raise_exception=True)
        membership = serializer.save(board=board)
        recorder.log_member_invited(request.user.pk, board, membership.user)
        return Response(BoardMemberSerializer(membership).data, status=status.HTTP_201_CREATED)


# =============================================================================
# CARDS
# =============================================================================

class CardCreateView(generics.CreateAPIView):
    serializer_class = CardSerializer
    permission_classes = [permissions.IsAuthenticated]

    def perform_create(self, serializer):
        board_list = serializer.validated_data["list"]
        if not accessible_boards(self.request.user).filter(pk=board_list.board_id).exists():
            raise PermissionDenied("You do not have access to this board.")
        card = serializer.save()
        recorder.log_card_created(self.request.user.pk, card)


class CardDetailView(generics.RetrieveUpdateDestroyAPIView):
    serializer_class = CardSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return accessible_cards(self.request.user)

    def perform_update(self, serializer):
        from_list = serializer.instance.list
        card = serializer.save()
        if card.list_id != from_list.pk:
            recorder.log_card_moved(self.request.user.pk, card, from_list, card.list)


class CardCompleteView(APIView):
    """
    Set or toggle a card's completed flag.

    Completing a card notifies its assignee and the board's owners/admins.
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        card = get_object_or_404(accessible_cards(request.user), pk=pk)
        serializer = CardCompletionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        completed = serializer.validated_data.get("completed", not card.completed)

        if completed != card.completed:
            card.completed = completed
            card.save(update_fields=["completed"])
            if completed:
                dispatch(notify_task_event, TaskEventContext(
                    actor_id=request.user.pk,
                    event=TASK_COMPLETED,
                    card_id=card.pk,
                    board_id=card.list.board_id,
                ))
                recorder.log_task_completed(request.user.pk, card)

        return Response(CardSerializer(card).data)


class CardMemberListView(APIView):
    """Assign a user to a card."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        card = get_object_or_404(accessible_cards(request.user), pk=pk)
        serializer = CardMemberCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        assignee = serializer.validated_data["user_id"]

        if CardMember.objects.filter(card=card, user=assignee).exists():
            raise ValidationError({"user_id": "User is already assigned to this card."})
        CardMember.objects.create(card=card, user=assignee)

        dispatch(notify_assignment, request.user.pk, assignee.pk, card_id=card.pk)
        recorder.log_card_assigned(request.user.pk, card, assignee)
        return Response(CardSerializer(card).data, status=status.HTTP_201_CREATED)


class CardMemberDetailView(APIView):
    """Remove a user from a card."""

    permission_classes = [permissions.IsAuthenticated]

    def delete(self, request, pk, user_id):
        card = get_object_or_404(accessible_cards(request.user), pk=pk)
        membership = get_object_or_404(CardMember, card=card, user_id=user_id)
        membership.delete()

        dispatch(notify_assignment, request.user.pk, user_id, card_id=card.pk, assigned=False)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CommentCreateView(generics.CreateAPIView):
    serializer_class = CommentSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_card(self):
        return get_object_or_404(accessible_cards(self.request.user), pk=self.kwargs["pk"])

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["card"] = self.get_card()
        return context

    def perform_create(self, serializer):
        comment = serializer.save(card=serializer.context["card"], user=self.request.user)
        recorder.log_comment_created(self.request.user.pk, comment)


# =============================================================================
# CHECKLIST ITEMS
# =============================================================================

class ChecklistItemDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    Retrieve, update or delete a subtask.

    Completing it notifies the assignee and board owners/admins; changing the
    assignee notifies both the previous and the new one.
    """

    serializer_class = ChecklistItemSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return ChecklistItem.objects.select_related("checklist__card__list__board").filter(
            checklist__card__list__board__in=accessible_boards(self.request.user)
        )

    def perform_update(self, serializer):
        actor_id = self.request.user.pk
        was_completed = serializer.instance.completed
        previous_assignee_id = serializer.instance.assigned_to_id

        item = serializer.save()
        card = item.checklist.card

        if item.completed and not was_completed:
            dispatch(notify_task_event, TaskEventContext(
                actor_id=actor_id,
                event=SUBTASK_COMPLETED,
                card_id=card.pk,
                checklist_item_id=item.pk,
                board_id=card.list.board_id,
            ))
            recorder.log_subtask_completed(actor_id, item)
            if not item.checklist.items.filter(completed=False).exists():
                recorder.log_checklist_completed(actor_id, item.checklist)

        if item.assigned_to_id != previous_assignee_id:
            if previous_assignee_id is not None:
                dispatch(
                    notify_assignment, actor_id, previous_assignee_id,
                    checklist_item_id=item.pk, assigned=False,
                )
            if item.assigned_to_id is not None:
                dispatch(notify_assignment, actor_id, item.assigned_to_id, checklist_item_id=item.pk)
