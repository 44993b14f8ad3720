"""
API views for the notifications app.
"""

from django.conf import settings
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Notification
from .serializers import NotificationListParamsSerializer, NotificationSerializer
from .sweeper import OverdueSweeper

NOT_FOUND = {"error": "notification not found"}


class NotificationListView(APIView):
    """The current user's notifications, newest first, hiding deleted ones."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        params = NotificationListParamsSerializer(data=request.query_params)
        if not params.is_valid():
            return Response(params.errors, status=status.HTTP_400_BAD_REQUEST)

        limit = params.validated_data.get("limit") or settings.NOTIFICATION_PAGE_SIZE
        offset = params.validated_data["offset"]

        queryset = Notification.objects.for_user(request.user).select_related("from_user")
        queryset = queryset.unread() if params.validated_data["unread_only"] else queryset.visible()

        return Response({
            "count": queryset.count(),
            "results": NotificationSerializer(queryset[offset:offset + limit], many=True).data,
        })


class UnreadCountView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        count = Notification.objects.for_user(request.user).unread().count()
        return Response({"count": count})


class NotificationReadView(APIView):
    """Mark one notification as read."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        if not Notification.objects.mark_read(pk, request.user):
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response({"success": True})

    patch = post


class MarkAllReadView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        updated = Notification.objects.mark_all_read(request.user)
        return Response({"success": True, "updated": updated})


class NotificationDetailView(APIView):
    """
    Delete one notification.

    The row is hidden (soft delete) unless ``?permanent=true`` is given.
    """

    permission_classes = [permissions.IsAuthenticated]

    def delete(self, request, pk):
        permanent = request.query_params.get("permanent", "").lower() in ("1", "true", "yes")
        if permanent:
            removed = Notification.objects.hard_delete(pk, request.user)
        else:
            removed = Notification.objects.soft_delete(pk, request.user)
        if not removed:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response({"success": True, "permanent": permanent})


class ClearAllView(APIView):
    """Hide every notification of the current user."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        cleared = Notification.objects.soft_delete_all(request.user)
        return Response({"success": True, "cleared": cleared})

    delete = post


class CheckOverdueTasksView(APIView):
    """Run an overdue sweep on demand. Staff only."""

    permission_classes = [permissions.IsAdminUser]

    def post(self, request):
        created = OverdueSweeper().run()
        return Response({"success": True, "notifications_created": created})
