"""
API URL routes for the boards app.
"""

from django.urls import path

from . import api_views

app_name = "boards_api"

urlpatterns = [
    path("boards/", api_views.BoardListCreateView.as_view(), name="board-list"),
    path("boards/<int:pk>/", api_views.BoardDetailView.as_view(), name="board-detail"),
    path("boards/<int:pk>/members/", api_views.BoardMemberListView.as_view(), name="board-members"),
    path("cards/", api_views.CardCreateView.as_view(), name="card-create"),
    path("cards/<int:pk>/", api_views.CardDetailView.as_view(), name="card-detail"),
    path("cards/<int:pk>/complete/", api_views.CardCompleteView.as_view(), name="card-complete"),
    path("cards/<int:pk>/members/", api_views.CardMemberListView.as_view(), name="card-members"),
    path(
        "cards/<int:pk>/members/<int:user_id>/",
        api_views.CardMemberDetailView.as_view(),
        name="card-member-detail",
    ),
    path("cards/<int:pk>/comments/", api_views.CommentCreateView.as_view(), name="card-comments"),
    path(
        "checklist-items/<int:pk>/",
        api_views.ChecklistItemDetailView.as_view(),
        name="checklist-item-detail",
    ),
]
