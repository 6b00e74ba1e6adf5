"""EDN type definitions and sentinels."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Union
from uuid import UUID


class Keyword(str):
    """An EDN keyword.

    Stored without its leading colon, so ``Keyword("db.type/string")``
    compares equal to ``"db.type/string"`` and writes as
    ``:db.type/string``. A leading colon passed to the constructor is
    dropped.
    """

    __slots__ = ()

    def __new__(cls, name: str, namespace: str | None = None) -> Keyword:
        name = name[1:] if name.startswith(":") else name
        if namespace:
            name = f"{namespace}/{name}"
        return super().__new__(cls, name)

    @property
    def namespace(self) -> str | None:
        if "/" not in self:
            return None
        return self.split("/", 1)[0]

    @property
    def name(self) -> str:
        return self.split("/", 1)[-1]

    def to_edn(self) -> str:
        return f":{self}"

    def __repr__(self) -> str:
        return f"Keyword({self.to_edn()!r})"


class _Skip:
    """Sentinel for values that should be skipped (unknown tags)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SKIP"


SKIP = _Skip()

NAMED_CHARS: dict[str, str] = {
    "newline": "\n",
    "space": " ",
    "tab": "\t",
    "return": "\r",
}

# Everything the reader produces
EDNValue = Union[
    None,
    bool,
    int,
    float,
    Decimal,
    str,
    Keyword,
    datetime,
    UUID,
    tuple["EDNValue", ...],
    frozenset["EDNValue"],
    dict["EDNValue", "EDNValue"],
]
