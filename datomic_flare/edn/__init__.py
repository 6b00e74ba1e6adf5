"""EDN (Extensible Data Notation) writer and reader.

The writer turns Python values into the EDN literals Datomic accepts in
transaction data; the reader parses EDN text back into Python values.

Example usage:
    >>> from datomic_flare.edn import dumps, loads, Keyword
    >>> dumps([Keyword("post/title"), "Hello", 1984])
    '[:post/title "Hello" 1984]'
    >>> loads('{:db/ident :post/title}')
    {Keyword(':db/ident'): Keyword(':post/title')}
"""

from __future__ import annotations

from datomic_flare.edn.datetime_utils import format_instant, parse_datetime
from datomic_flare.edn.reader import EdnReader
from datomic_flare.edn.tags import TagRegistry, default_registry
from datomic_flare.edn.types import SKIP, EDNValue, Keyword
from datomic_flare.edn.writer import dumps
from datomic_flare.exceptions import EDNParseError


def loads(
    s: str | bytes,
    max_depth: int = 100,
    tag_registry: TagRegistry | None = None,
) -> EDNValue:
    """Parse the first value of an EDN document.

    Args:
        s: EDN text, or UTF-8 encoded bytes such as a raw response body.
        max_depth: How deeply collections may nest before parsing fails.
        tag_registry: Handlers for tagged literals; the default registry
            knows ``#inst``, ``#uuid``, ``#db/id`` and ``#db/fn``.

    Returns:
        The first value that is not discarded. Empty input and ``nil``
        both give None.

    Raises:
        EDNParseError: On malformed EDN or bytes that are not UTF-8.
    """
    if isinstance(s, bytes):
        try:
            s = s.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EDNParseError(f"Invalid UTF-8 encoding: {e}") from e

    reader = EdnReader(s, max_depth=max_depth, tag_registry=tag_registry)
    value = reader.read_value()
    while value is SKIP:
        value = reader.read_value()
    return value


__all__ = [
    "loads",
    "dumps",
    "EdnReader",
    "EDNParseError",
    "EDNValue",
    "Keyword",
    "SKIP",
    "TagRegistry",
    "default_registry",
    "format_instant",
    "parse_datetime",
]
