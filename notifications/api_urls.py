"""
API URL routes for notifications app.
"""

from django.urls import path

from . import api_views

app_name = "notifications_api"

urlpatterns = [
    path("", api_views.NotificationListView.as_view(), name="list"),
    path("unread-count/", api_views.UnreadCountView.as_view(), name="unread-count"),
    path("mark-all-read/", api_views.MarkAllReadView.as_view(), name="mark-all-read"),
    path("clear-all/", api_views.ClearAllView.as_view(), name="clear-all"),
    path("<int:pk>/", api_views.NotificationDetailView.as_view(), name="detail"),
    path("<int:pk>/read/", api_views.NotificationReadView.as_view(), name="read"),
]
