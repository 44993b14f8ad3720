"""
API URL routes for the audit app.
"""

from django.urls import path

from . import api_views

app_name = "audit_api"

urlpatterns = [
    path("audit-logs/", api_views.AuditLogListView.as_view(), name="audit-logs"),
]
