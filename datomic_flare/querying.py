"""Entity results -> nested DSL structures."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

# Keys Flare uses for an entity's id.
IDENTITY_KEYS = frozenset({":db/id", "id"})


def _to_dsl_key(key: str) -> str:
    if key in IDENTITY_KEYS:
        return "_id"
    return str(key).rsplit("/", 1)[-1]


def keys_to_dsl(entity: Mapping[str, Any]) -> dict[str, Any]:
    """Strip namespaces from keys, recursing into nested entities."""
    return {
        _to_dsl_key(key): keys_to_dsl(value) if isinstance(value, Mapping) else value
        for key, value in entity.items()
    }


def entity_to_dsl(entity: Mapping[str, Any]) -> dict[str, dict[str, Any]] | None:
    """Reshape a flat entity into ``{namespace: {attribute: value}}``.

    Returns None for an entity that holds nothing but its id::

        >>> entity_to_dsl({":movie/title": "Repo Man", ":db/id": 17592186045430})
        {'movie': {'title': 'Repo Man', '_id': 17592186045430}}
        >>> entity_to_dsl({":db/id": 17592186045430}) is None
        True
    """
    key = next((k for k in entity if k not in IDENTITY_KEYS), None)
    if key is None:
        return None

    namespace = str(key).split("/", 1)[0].lstrip(":")
    return {namespace: keys_to_dsl(entity)}
