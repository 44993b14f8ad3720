"""
Registry of "current state" fetchers used to capture before-images.

Apps register one fetcher per entity type from ``AppConfig.ready()``; the
audit middleware looks them up by the type resolved from the request path.
"""

import logging
from typing import Callable, Dict, Optional

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from core.security import redact_sensitive

logger = logging.getLogger("audit")

Fetcher = Callable[[int], Optional[dict]]

_registry: Dict[str, Fetcher] = {}


def register(entity_type: str, fetcher: Fetcher) -> None:
    _registry[str(entity_type)] = fetcher


def unregister(entity_type: str) -> None:
    _registry.pop(str(entity_type), None)


def registered_types():
    return sorted(_registry)


def model_to_snapshot(instance: models.Model) -> dict:
    """Serialize the concrete fields of a model instance to JSON-safe values."""
    data = {}
    encoder = DjangoJSONEncoder()
    for field in instance._meta.concrete_fields:
        value = field.value_from_object(instance)
        if value is not None and not isinstance(value, (str, int, float, bool, list, dict)):
            value = encoder.default(value)
        data[field.attname] = value
    return data


def model_fetcher(model) -> Fetcher:
    """Build a fetcher returning a snapshot of ``model`` by primary key."""

    def fetch(pk):
        instance = model._default_manager.filter(pk=pk).first()
        return model_to_snapshot(instance) if instance is not None else None

    fetch.__name__ = f"fetch_{model._meta.model_name}"
    return fetch


def capture_snapshot(entity_type: str, entity_id) -> Optional[dict]:
    """
    Return the redacted current state of an entity, or None.

    Unknown types, non-numeric ids, missing rows and fetch errors all give
    None so the request proceeds unaffected.
    """
    fetcher = _registry.get(str(entity_type))
    if fetcher is None:
        return None
    try:
        pk = int(entity_id)
    except (TypeError, ValueError):
        return None

    try:
        snapshot = fetcher(pk)
    except Exception:
        logger.warning("Could not capture state of %s:%s", entity_type, entity_id, exc_info=True)
        return None
    return redact_sensitive(snapshot)
