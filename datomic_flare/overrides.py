"""Forced database-selector overrides applied to outgoing payloads.

A client can be built with ``dangerously_override={"database": {...}}`` to
pin every request to one database (and, for reads, one point in time),
whatever the calling code asks for. Writes only honour ``name``; reads
honour ``name``, ``as_of`` and ``latest``. ``as_of`` and ``latest`` are
mutually exclusive: forcing one removes the other from the payload.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from datomic_flare.exceptions import PayloadShapeError, UnrecognizedOperationError

CONNECTION_DATABASE_KEYS = ("name",)

DATABASE_KEYS = ("name", "latest", "as_of")

PASSTHROUGH_PATHS = frozenset(
    {
        "datomic/create-database",
        "datomic/delete-database",
        "datomic/get-database-names",
        "datomic/list-databases",
        "meta",
        "datomic/_debug/as-peer/create-database",
        "datomic/_debug/as-peer/delete-database",
    }
)

TRANSACT_PATH = "datomic/transact"
DATABASE_PATHS = frozenset({"datomic/entity", "datomic/datoms"})
QUERY_PATH = "datomic/q"


@dataclass(frozen=True)
class OverridePolicy:
    """Read-only override configuration held by a client for its lifetime."""

    database: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "database", MappingProxyType(dict(self.database or {})))

    @classmethod
    def from_mapping(cls, overrides: Mapping[str, Any] | None) -> OverridePolicy:
        """Build a policy from ``{"database": {"name": ..., "as_of": ...}}``."""
        if isinstance(overrides, OverridePolicy):
            return overrides
        return cls(database=(overrides or {}).get("database") or {})

    def _slice(self, keys: tuple[str, ...]) -> dict[str, Any]:
        return {k: self.database[k] for k in keys if k in self.database}

    @property
    def connection_fields(self) -> dict[str, Any]:
        """Overrides that apply to write (transact) operations."""
        return self._slice(CONNECTION_DATABASE_KEYS)

    @property
    def database_fields(self) -> dict[str, Any]:
        """Overrides that apply to read operations."""
        return self._slice(DATABASE_KEYS)

    def __bool__(self) -> bool:
        return bool(self.database_fields)


def apply_dangerous_overrides_to_payload(
    path: str, policy: OverridePolicy, payload: Mapping[str, Any] | None
) -> Any:
    """Return ``payload`` with the policy's overrides injected for ``path``.

    The input payload is never modified; when anything is injected a new
    payload is returned.

    Raises:
        UnrecognizedOperationError: If ``path`` is not a Flare operation.
        PayloadShapeError: If a query payload has no database input.
    """
    if path in PASSTHROUGH_PATHS:
        return payload
    if path == TRANSACT_PATH:
        return inject_connection_overrides(policy, payload)
    if path in DATABASE_PATHS:
        return inject_database_overrides(policy, payload)
    if path == QUERY_PATH:
        return inject_database_overrides_into_inputs(policy, payload)
    raise UnrecognizedOperationError(f"Unexpected path: '{path}'")


def inject_connection_overrides(policy: OverridePolicy, payload: Mapping[str, Any] | None) -> Any:
    """Force ``connection.database.name`` on a transact payload."""
    overrides = policy.connection_fields
    if not overrides:
        return payload

    result = copy.deepcopy(dict(payload or {}))
    connection = result["connection"] = dict(result.get("connection") or {})
    connection["database"] = {**(connection.get("database") or {}), **overrides}
    return result


def inject_overrides_into_selector(
    policy: OverridePolicy, selector: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Merge the read overrides into one database selector.

    Forcing ``as_of`` drops ``latest`` from the selector and forcing
    ``latest`` drops ``as_of``.
    """
    overrides = policy.database_fields
    result = dict(selector or {})
    if "as_of" in overrides:
        result.pop("latest", None)
    if "latest" in overrides:
        result.pop("as_of", None)
    result.update(overrides)
    return result


def inject_database_overrides(policy: OverridePolicy, payload: Mapping[str, Any] | None) -> Any:
    """Force the ``database`` selector of an entity or datoms payload."""
    if not policy.database_fields:
        return payload

    result = copy.deepcopy(dict(payload or {}))
    result["database"] = inject_overrides_into_selector(policy, result.get("database"))
    return result


def inject_database_overrides_into_inputs(
    policy: OverridePolicy, payload: Mapping[str, Any] | None
) -> Any:
    """Force the first database input of a query payload."""
    if not policy.database_fields:
        return payload

    result = copy.deepcopy(dict(payload or {}))
    inputs = result["inputs"] = list(result.get("inputs") or [])

    index = next(
        (
            i
            for i, item in enumerate(inputs)
            if isinstance(item, Mapping) and "database" in item
        ),
        None,
    )
    if index is None:
        raise PayloadShapeError(f"Query payload has no database input: {inputs!r}")

    item = dict(inputs[index])
    item["database"] = inject_overrides_into_selector(policy, item["database"])
    inputs[index] = item
    return result
