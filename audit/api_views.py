"""
API views for the audit viewer.
"""

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import AuditLog
from .serializers import AuditLogFilterSerializer, AuditLogSerializer


class AuditLogListView(APIView):
    """List audit entries, newest first. Staff only."""

    permission_classes = [permissions.IsAdminUser]

    def get(self, request):
        filters = AuditLogFilterSerializer(data=request.query_params)
        if not filters.is_valid():
            return Response(filters.errors, status=status.HTTP_400_BAD_REQUEST)

        params = filters.validated_data
        limit = params.pop("limit")
        offset = params.pop("offset")

        queryset = AuditLog.objects.select_related("user").filter_by(**params)
        total = queryset.count()
        page = queryset[offset:offset + limit]

        return Response({
            "count": total,
            "limit": limit,
            "offset": offset,
            "results": AuditLogSerializer(page, many=True).data,
        })
