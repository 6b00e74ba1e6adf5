"""Tagged literal support for the EDN reader."""

from __future__ import annotations

from typing import Any, Callable
from uuid import UUID

from datomic_flare.edn.datetime_utils import parse_datetime
from datomic_flare.exceptions import EDNParseError

# (tagged value, position of the '#') -> Python value
TagHandler = Callable[[Any, "int | None"], Any]


def _read_inst(value: Any, pos: int | None = None) -> Any:
    return parse_datetime(value, pos) if isinstance(value, str) else value


def _read_uuid(value: Any, pos: int | None = None) -> Any:
    if not isinstance(value, str):
        return value
    try:
        return UUID(value)
    except ValueError as e:
        raise EDNParseError(f"Invalid uuid {value!r} at position {pos}") from e


def _identity(value: Any, pos: int | None = None) -> Any:
    return value


class TagRegistry:
    """Maps tag names (``inst``, ``db/id``, ...) to handlers.

    Out of the box it knows ``#inst``, ``#uuid`` and the Datomic tags
    ``#db/id`` and ``#db/fn``, which keep their tagged value as is. The
    reader drops values whose tag has no handler.
    """

    def __init__(self):
        self._handlers: dict[str, TagHandler] = {
            "inst": _read_inst,
            "uuid": _read_uuid,
            "db/id": _identity,
            "db/fn": _identity,
        }

    def register(self, tag: str, handler: TagHandler) -> None:
        self._handlers[tag] = handler

    def get_handler(self, tag: str) -> TagHandler | None:
        return self._handlers.get(tag)


default_registry = TagRegistry()
