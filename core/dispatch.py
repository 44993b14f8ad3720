"""
Fire-and-forget execution of side effects outside the request path.

Audit persistence, activity recording and notification rules all go through
``get_dispatcher().submit(...)``. The implementation is picked by the
``DEFERRED_DISPATCHER`` setting so tests can run everything inline.
"""

import atexit
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache

from django.conf import settings
from django.core.signals import setting_changed
from django.db import close_old_connections
from django.dispatch import receiver
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


class BaseDispatcher:
    """Runs a callable at some point after ``submit`` returns."""

    def submit(self, func, *args, **kwargs):
        raise NotImplementedError

    def shutdown(self, wait=True):
        pass

    def _run(self, func, *args, **kwargs):
        try:
            func(*args, **kwargs)
        except Exception:
            # The caller has already moved on, so the error stops here
            logger.exception("Deferred task %s failed", getattr(func, "__name__", func))


class InlineDispatcher(BaseDispatcher):
    """Runs the callable immediately, in the caller's thread."""

    def submit(self, func, *args, **kwargs):
        self._run(func, *args, **kwargs)


class ThreadPoolDispatcher(BaseDispatcher):
    """Runs callables on a bounded pool of worker threads."""

    def __init__(self, max_workers=None):
        self.max_workers = max_workers or getattr(settings, "DEFERRED_DISPATCHER_WORKERS", 4)
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="deferred",
        )

    def submit(self, func, *args, **kwargs):
        try:
            self._executor.submit(self._run_in_worker, func, *args, **kwargs)
        except RuntimeError:
            # Executor already shut down (interpreter exit)
            logger.warning("Dispatcher shut down, dropping %s", getattr(func, "__name__", func))

    def _run_in_worker(self, func, *args, **kwargs):
        close_old_connections()
        try:
            self._run(func, *args, **kwargs)
        finally:
            close_old_connections()

    def shutdown(self, wait=True):
        self._executor.shutdown(wait=wait)


@lru_cache(maxsize=None)
def get_dispatcher() -> BaseDispatcher:
    """Return the process-wide dispatcher configured in settings."""
    dispatcher_class = import_string(settings.DEFERRED_DISPATCHER)
    dispatcher = dispatcher_class()
    atexit.register(dispatcher.shutdown)
    return dispatcher


def dispatch(func, *args, **kwargs):
    """Shortcut for ``get_dispatcher().submit(func, *args, **kwargs)``."""
    get_dispatcher().submit(func, *args, **kwargs)


def close_dispatcher(wait=False):
    """Shut down the cached dispatcher, if any, and forget it."""
    if get_dispatcher.cache_info().currsize:
        dispatcher = get_dispatcher()
        atexit.unregister(dispatcher.shutdown)
        dispatcher.shutdown(wait=wait)
    get_dispatcher.cache_clear()


@receiver(setting_changed)
def reset_dispatcher(*, setting, **kwargs):
    if setting in ("DEFERRED_DISPATCHER", "DEFERRED_DISPATCHER_WORKERS"):
        close_dispatcher()
