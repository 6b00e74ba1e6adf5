"""Character-level EDN parser used by :func:`datomic_flare.edn.loads`."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Callable

from datomic_flare.edn.tags import TagRegistry, default_registry
from datomic_flare.edn.types import NAMED_CHARS, SKIP, EDNValue, Keyword
from datomic_flare.exceptions import EDNParseError

DELIMITERS = " \t\n\r,()[]{}\"\\;"

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}


class EdnReader:
    """Reads the subset of EDN that Datomic transaction data and results use.

    Vectors and lists become tuples, sets become frozensets, keywords
    become :class:`Keyword`, ``M``-suffixed numbers become
    :class:`~decimal.Decimal` and ``N``-suffixed numbers become ints.
    """

    def __init__(
        self,
        s: str,
        max_depth: int = 100,
        tag_registry: TagRegistry | None = None,
    ):
        self.s = s
        self.pos = 0
        self.length = len(s)
        self.max_depth = max_depth
        self._depth = 0
        self._tag_registry = tag_registry or default_registry

        self._readers: dict[str, Callable[[], EDNValue]] = {
            '"': self._read_string,
            "[": self._read_vector,
            "(": self._read_list,
            "{": self._read_map,
            "#": self._read_dispatch,
            "\\": self._read_char,
            ":": self._read_keyword,
        }

    def peek(self) -> str | None:
        if self.pos >= self.length:
            return None
        return self.s[self.pos]

    def read(self) -> str | None:
        if self.pos >= self.length:
            return None
        c = self.s[self.pos]
        self.pos += 1
        return c

    def skip_whitespace_and_comments(self) -> None:
        while self.pos < self.length:
            c = self.s[self.pos]
            if c in " \t\n\r,":
                self.pos += 1
            elif c == ";":
                end = self.s.find("\n", self.pos)
                self.pos = self.length if end == -1 else end + 1
            else:
                break

    def _read_token(self, first_char: str) -> str:
        start = self.pos
        while self.pos < self.length and self.s[self.pos] not in DELIMITERS:
            self.pos += 1
        return first_char + self.s[start:self.pos]

    def _read_string(self) -> str:
        start_pos = self.pos - 1
        chars = []
        while True:
            c = self.read()
            if c is None:
                raise EDNParseError(f"Unterminated string at position {start_pos}")
            if c == '"':
                return "".join(chars)
            if c == "\\":
                escape = self.read()
                if escape is None:
                    raise EDNParseError(f"Unterminated string at position {start_pos}")
                chars.append(_ESCAPES.get(escape, escape))
            else:
                chars.append(c)

    def _read_number(self, first_char: str) -> int | float | Decimal:
        start_pos = self.pos - 1
        token = self._read_token(first_char)
        try:
            if token.endswith("M"):
                return Decimal(token[:-1])
            if token.endswith("N"):
                return int(token[:-1])
            if any(c in token for c in ".eE"):
                return float(token)
            return int(token)
        except (ValueError, InvalidOperation) as e:
            raise EDNParseError(f"Invalid number {token!r} at position {start_pos}") from e

    def _read_char(self) -> str:
        start_pos = self.pos - 1
        if self.pos >= self.length:
            raise EDNParseError(
                f"Unexpected end of input reading character at position {start_pos}"
            )
        for name, char_value in NAMED_CHARS.items():
            end_pos = self.pos + len(name)
            if self.s.startswith(name, self.pos) and (
                end_pos >= self.length or self.s[end_pos] in DELIMITERS
            ):
                self.pos = end_pos
                return char_value
        return self.read()

    def _enter(self, start_pos: int) -> None:
        self._depth += 1
        if self._depth > self.max_depth:
            raise EDNParseError(
                f"Maximum nesting depth ({self.max_depth}) exceeded at position {start_pos}"
            )

    def _read_collection(self, end_char: str) -> list:
        start_pos = self.pos - 1
        self._enter(start_pos)
        try:
            items = []
            while True:
                self.skip_whitespace_and_comments()
                c = self.peek()
                if c is None:
                    raise EDNParseError(
                        f"Unterminated collection, expected {end_char} at position {start_pos}"
                    )
                if c == end_char:
                    self.read()
                    return items
                value = self.read_value()
                if value is not SKIP:
                    items.append(value)
        finally:
            self._depth -= 1

    def _read_vector(self) -> tuple:
        return tuple(self._read_collection("]"))

    def _read_list(self) -> tuple:
        return tuple(self._read_collection(")"))

    def _read_map(self) -> dict:
        start_pos = self.pos - 1
        self._enter(start_pos)
        try:
            result = {}
            while True:
                self.skip_whitespace_and_comments()
                c = self.peek()
                if c is None:
                    raise EDNParseError(f"Unterminated map at position {start_pos}")
                if c == "}":
                    self.read()
                    return result
                key = self.read_value()
                self.skip_whitespace_and_comments()
                if self.peek() in (None, "}"):
                    raise EDNParseError(
                        f"Map literal with odd number of forms at position {start_pos}"
                    )
                value = self.read_value()
                # entries with an unknown tag on either side are dropped
                if key is not SKIP and value is not SKIP:
                    result[key] = value
        finally:
            self._depth -= 1

    def _read_dispatch(self) -> EDNValue:
        dispatch_pos = self.pos - 1
        next_c = self.peek()
        if next_c == "{":
            self.read()
            items = self._read_collection("}")
            try:
                return frozenset(items)
            except TypeError:
                return tuple(items)
        if next_c == "_":
            self.read()
            self.read_value()
            return SKIP
        tag = self._read_token("")
        self.skip_whitespace_and_comments()
        value = self.read_value()
        handler = self._tag_registry.get_handler(tag)
        if handler is None:
            return SKIP
        return handler(value, dispatch_pos)

    def _read_keyword(self) -> Keyword:
        start_pos = self.pos - 1
        name = self._read_token("")
        if not name:
            raise EDNParseError(f"Empty keyword at position {start_pos}")
        return Keyword(name)

    def read_value(self) -> EDNValue:
        """Read a single EDN value.

        Returns None for both empty input and ``nil``.
        """
        self.skip_whitespace_and_comments()

        c = self.peek()
        if c is None:
            return None

        if c in self._readers:
            self.read()
            return self._readers[c]()

        nxt = self.s[self.pos + 1] if self.pos + 1 < self.length else ""
        if c.isdigit() or c == "." or (c in "-+" and (nxt.isdigit() or nxt == ".")):
            return self._read_number(self.read())

        if c not in "()[]{}\"\\;,@":
            word = self._read_token(self.read())
            if word == "true":
                return True
            if word == "false":
                return False
            if word == "nil":
                return None
            return word

        raise EDNParseError(f"Unexpected character: {c} at position {self.pos}")
