"""
Tests for deferred dispatch and the delivery context.
"""

import threading
from unittest.mock import MagicMock, patch

import pytest
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory

from core import dispatch as dispatch_module
from core.context import DeliveryContext, display_name
from core.dispatch import InlineDispatcher, ThreadPoolDispatcher, get_dispatcher


@pytest.fixture
def rf_user():
    return MagicMock(pk=5, is_authenticated=True)


class TestInlineDispatcher:
    def test_runs_immediately(self):
        func = MagicMock()

        InlineDispatcher().submit(func, 1, key="value")

        func.assert_called_once_with(1, key="value")

    def test_errors_are_logged_not_raised(self):
        def broken():
            raise RuntimeError("boom")

        with patch.object(dispatch_module.logger, "exception") as mock_log:
            InlineDispatcher().submit(broken)

        mock_log.assert_called_once()


class TestThreadPoolDispatcher:
    def test_runs_on_worker_thread(self):
        done = threading.Event()
        seen = {}

        def work():
            seen["thread"] = threading.current_thread().name
            done.set()

        dispatcher = ThreadPoolDispatcher(max_workers=1)
        try:
            dispatcher.submit(work)
            assert done.wait(timeout=5)
        finally:
            dispatcher.shutdown()

        assert seen["thread"].startswith("deferred")

    def test_worker_errors_do_not_escape(self):
        done = threading.Event()

        def broken():
            done.set()
            raise RuntimeError("boom")

        dispatcher = ThreadPoolDispatcher(max_workers=1)
        with patch.object(dispatch_module.logger, "exception") as mock_log:
            dispatcher.submit(broken)
            assert done.wait(timeout=5)
            dispatcher.shutdown(wait=True)

        mock_log.assert_called_once()

    def test_submit_after_shutdown_is_dropped(self):
        dispatcher = ThreadPoolDispatcher(max_workers=1)
        dispatcher.shutdown()
        func = MagicMock()

        dispatcher.submit(func)

        func.assert_not_called()


class TestGetDispatcher:
    def test_follows_setting(self, settings):
        settings.DEFERRED_DISPATCHER = "core.dispatch.InlineDispatcher"
        assert isinstance(get_dispatcher(), InlineDispatcher)
        assert get_dispatcher() is get_dispatcher()

        settings.DEFERRED_DISPATCHER = "core.dispatch.ThreadPoolDispatcher"
        threaded = get_dispatcher()
        try:
            assert isinstance(threaded, ThreadPoolDispatcher)
        finally:
            threaded.shutdown()
            settings.DEFERRED_DISPATCHER = "core.dispatch.InlineDispatcher"

    def test_setting_change_shuts_down_previous_pool(self, settings):
        settings.DEFERRED_DISPATCHER = "core.dispatch.ThreadPoolDispatcher"
        threaded = get_dispatcher()

        with patch.object(threaded, "shutdown", wraps=threaded.shutdown) as mock_shutdown:
            settings.DEFERRED_DISPATCHER = "core.dispatch.InlineDispatcher"

        mock_shutdown.assert_called_once_with(wait=False)
        assert isinstance(get_dispatcher(), InlineDispatcher)
        func = MagicMock()
        threaded.submit(func)
        func.assert_not_called()


class TestDeliveryContext:
    def test_from_authenticated_request(self, rf_user):
        request = RequestFactory().post(
            "/api/boards/", HTTP_USER_AGENT="agent/1.0", REMOTE_ADDR="198.51.100.2",
        )
        request.user = rf_user

        context = DeliveryContext.from_request(request)

        assert context.actor_id == rf_user.pk
        assert context.ip_address == "198.51.100.2"
        assert context.user_agent == "agent/1.0"
        assert context.session_id == ""

    def test_explicit_actor_wins(self, rf_user):
        request = RequestFactory().get("/")
        request.user = rf_user

        assert DeliveryContext.from_request(request, actor_id=99).actor_id == 99

    def test_anonymous_request_has_no_actor(self):
        request = RequestFactory().get("/")
        request.user = AnonymousUser()

        assert DeliveryContext.from_request(request).actor_id is None

    def test_system_context(self):
        context = DeliveryContext.system()

        assert context.actor_id is None
        assert context.user_agent == "system"


class TestDisplayName:
    def test_full_name_preferred(self):
        user = MagicMock()
        user.get_full_name.return_value = "Ada Lovelace"

        assert display_name(user) == "Ada Lovelace"

    def test_falls_back_to_username(self):
        user = MagicMock()
        user.get_full_name.return_value = ""
        user.get_username.return_value = "ada"

        assert display_name(user) == "ada"

    def test_missing_user(self):
        assert display_name(None) == "Someone"
