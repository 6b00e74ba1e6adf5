"""Shape query result rows.

A row factory is called with one raw result row (a JSON array) and the
column names of the query, and returns whatever a row should be for the
caller. ``DSL.query`` derives the column names from the ``:find`` clause
unless they are given explicitly.
"""

from __future__ import annotations

import re
from collections import namedtuple
from collections.abc import Mapping, Sequence
from dataclasses import fields, is_dataclass
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")
RowT = TypeVar("RowT", covariant=True)

# Everything between :find and the next clause keyword
_FIND_CLAUSE = re.compile(
    r":find\s+(.*?)(?:\s*:(?:in|where|with|keys|strs|syms)\s|$)", re.DOTALL | re.IGNORECASE
)
_LOGIC_VAR = re.compile(r"\?([\w-]+)")


@runtime_checkable
class RowFactory(Protocol[RowT]):
    def __call__(self, row: Sequence[Any], columns: Sequence[str]) -> RowT: ...


def extract_find_vars(query: str) -> tuple[str, ...]:
    """
    Column names for a query: its ``:find`` variables without the ``?``.

    Example:
        >>> extract_find_vars("[:find ?e (count ?title) :where [?e :movie/title ?title]]")
        ('e', 'title')

    """
    clause = _FIND_CLAUSE.search(query)
    if clause is None:
        return ()
    return tuple(_LOGIC_VAR.findall(clause.group(1)))


def _field_name(column: str) -> str:
    """``?release-year`` and ``:movie/release-year`` -> valid identifiers."""
    return column.lstrip("?:").replace("/", "_").replace("-", "_")


def tuple_row(row: Sequence[Any], columns: Sequence[str]) -> tuple[Any, ...]:
    return tuple(row)


def dict_row(row: Sequence[Any], columns: Sequence[str]) -> dict[str, Any]:
    """``{column: value}``; row and columns must have the same length."""
    return dict(zip(columns, row, strict=True))


class NamedTupleRowFactory:
    """
    Rows as namedtuples. One class is built per distinct column list.

    Example:
        movie = namedtuple_row("Movie")
        movie([17592186045430, "Repo Man"], ["e", "movie/title"])
        # -> Movie(e=17592186045430, movie_title='Repo Man')
    """

    def __init__(self, name: str = "Row") -> None:
        self.name = name
        self._classes: dict[tuple[str, ...], type] = {}

    def __call__(self, row: Sequence[Any], columns: Sequence[str]) -> Any:
        key = tuple(columns)
        row_class = self._classes.get(key)
        if row_class is None:
            row_class = namedtuple(self.name, [_field_name(c) for c in key], rename=True)
            self._classes[key] = row_class
        return row_class(*row)


def namedtuple_row(name: str = "Row") -> NamedTupleRowFactory:
    return NamedTupleRowFactory(name)


class DataclassRowFactory(Generic[T]):
    """
    Rows as dataclass instances.

    Each column is looked up in ``field_mapping`` first, then matched to an
    ``__init__`` field by name. Columns without a matching field are
    dropped, so a query may return more than the dataclass holds.
    """

    def __init__(self, cls: type[T], field_mapping: Mapping[str, str] | None = None) -> None:
        if not is_dataclass(cls):
            raise TypeError(f"{cls.__name__} is not a dataclass")
        self.cls = cls
        self.field_mapping = dict(field_mapping or {})
        self._init_fields = frozenset(f.name for f in fields(cls) if f.init)

    def __call__(self, row: Sequence[Any], columns: Sequence[str]) -> T:
        values: dict[str, Any] = {}
        for column, value in zip(columns, row, strict=True):
            name = _field_name(self.field_mapping.get(column, column))
            if name in self._init_fields:
                values[name] = value
        return self.cls(**values)


def dataclass_row(
    cls: type[T], field_mapping: Mapping[str, str] | None = None
) -> DataclassRowFactory[T]:
    """
    Build a row factory for ``cls``.

    Example:
        @dataclass
        class Movie:
            title: str
            release_year: int

        flare.dsl.query(
            "[:find ?title ?release-year :where [?e :movie/title ?title]"
            " [?e :movie/release_year ?release-year]]",
            row_factory=dataclass_row(Movie),
        )
    """
    return DataclassRowFactory(cls, field_mapping)
