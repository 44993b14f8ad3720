"""
Dashboard API views for the activity timeline.
"""

from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Activity
from .serializers import ActivityFilterSerializer, ActivityPageSerializer, ActivitySerializer


def _parse_filters(request, serializer_class=ActivityFilterSerializer):
    filters = serializer_class(data=request.query_params)
    filters.is_valid(raise_exception=True)
    return dict(filters.validated_data)


class ActivityListView(APIView):
    """Filtered timeline, newest first. Staff only."""

    permission_classes = [permissions.IsAdminUser]

    def get(self, request):
        params = _parse_filters(request, ActivityPageSerializer)
        limit = params.pop("limit")
        offset = params.pop("offset")

        queryset = Activity.objects.select_related("user", "board").filter_by(**params)
        return Response({
            "count": queryset.count(),
            "results": ActivitySerializer(queryset[offset:offset + limit], many=True).data,
        })


class ActivityStatsView(APIView):
    """Number of timeline entries per activity type. Staff only."""

    permission_classes = [permissions.IsAdminUser]

    def get(self, request):
        params = _parse_filters(request)
        counts = Activity.objects.filter_by(**params).count_by_type()
        return Response({
            "total": sum(counts.values()),
            "by_type": counts,
        })
