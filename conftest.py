"""
Pytest fixtures for Task Board tests.
"""

from datetime import timedelta
from types import SimpleNamespace

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from boards.models import Board, BoardList, BoardMember, BoardRole, Card, CardMember, Checklist, ChecklistItem

User = get_user_model()


@pytest.fixture(autouse=True)
def inline_dispatch(settings):
    """Run deferred audit, activity and notification writes synchronously."""
    settings.DEFERRED_DISPATCHER = "core.dispatch.InlineDispatcher"


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear Django cache before and after each test to prevent cache pollution."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Return an API client for testing."""
    return APIClient()


@pytest.fixture
def create_user(db):
    """Factory fixture to create users."""
    def _create_user(username="testuser", password="SecurePass123!@#", **kwargs):
        return User.objects.create_user(username=username, password=password, **kwargs)
    return _create_user


@pytest.fixture
def user(create_user):
    return create_user("alice", first_name="Alice", last_name="Actor")


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client."""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def staff_user(create_user):
    return create_user("staff", is_staff=True)


@pytest.fixture
def staff_client(api_client, staff_user):
    api_client.force_authenticate(user=staff_user)
    return api_client


@pytest.fixture
def board_setup(create_user):
    """
    A board owned by ``owner`` with ``admin`` as board admin, ``assignee`` as
    first member of ``card`` and ``actor`` as a plain editor.
    """
    owner = create_user("carol", first_name="Carol", last_name="Owner")
    admin = create_user("dave", first_name="Dave", last_name="Admin")
    assignee = create_user("bob", first_name="Bob", last_name="Assignee")
    actor = create_user("alice", first_name="Alice", last_name="Actor")

    board = Board.objects.create(title="Launch", owner=owner)
    BoardMember.objects.create(board=board, user=owner, role=BoardRole.OWNER)
    BoardMember.objects.create(board=board, user=admin, role=BoardRole.ADMIN)
    BoardMember.objects.create(board=board, user=assignee, role=BoardRole.EDITOR)
    BoardMember.objects.create(board=board, user=actor, role=BoardRole.EDITOR)

    todo = BoardList.objects.create(title="To do", board=board, order=0)
    done = BoardList.objects.create(title="Done", board=board, order=1)
    card = Card.objects.create(title="Write release notes", list=todo)
    CardMember.objects.create(card=card, user=assignee)

    checklist = Checklist.objects.create(title="Steps", card=card)
    item = ChecklistItem.objects.create(content="Draft outline", checklist=checklist, assigned_to=assignee)

    return SimpleNamespace(
        owner=owner,
        admin=admin,
        assignee=assignee,
        actor=actor,
        board=board,
        todo=todo,
        done=done,
        card=card,
        checklist=checklist,
        item=item,
    )


@pytest.fixture
def yesterday():
    return timezone.now() - timedelta(days=1)
