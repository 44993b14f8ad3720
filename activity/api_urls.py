"""
API URL routes for the activity dashboard.
"""

from django.urls import path

from . import api_views

app_name = "activity_api"

urlpatterns = [
    path("activities/", api_views.ActivityListView.as_view(), name="activities"),
    path("activity-stats/", api_views.ActivityStatsView.as_view(), name="activity-stats"),
]
