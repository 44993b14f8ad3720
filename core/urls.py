"""
URL configuration for the Task Board project.
"""

from django.contrib import admin
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import include, path

from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from notifications.api_views import CheckOverdueTasksView


def health_view(request):
    """Liveness probe; not audited."""
    try:
        connection.ensure_connection()
        database = "ok"
    except DatabaseError:
        database = "unavailable"
    status_code = 200 if database == "ok" else 503
    return JsonResponse({"status": "ok" if status_code == 200 else "degraded", "database": database},
                        status=status_code)


urlpatterns = [
    # Admin
    path("admin/", admin.site.urls),

    # API Authentication (JWT)
    path("api/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/health/", health_view, name="health"),

    # Apps
    path("api/", include("boards.api_urls")),
    path("api/admin/", include("audit.api_urls")),
    path("api/dashboard/", include("activity.api_urls")),
    path("api/notifications/", include("notifications.api_urls")),
    path("api/check-overdue-tasks/", CheckOverdueTasksView.as_view(), name="check_overdue_tasks"),
]
