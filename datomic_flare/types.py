"""Mapping between DSL type tags and Datomic's schema vocabulary."""

from __future__ import annotations

from enum import Enum

from datomic_flare.exceptions import (
    UnknownCardinalityError,
    UnknownTypeError,
    UnknownUniquenessError,
)

# Cardinality constants
ONE = ":db.cardinality/one"
MANY = ":db.cardinality/many"

# Uniqueness constants
IDENTITY = ":db.unique/identity"
VALUE = ":db.unique/value"

# Value type constants
STRING = ":db.type/string"
BOOLEAN = ":db.type/boolean"
LONG = ":db.type/long"
BIGINT = ":db.type/bigint"
FLOAT = ":db.type/float"
DOUBLE = ":db.type/double"
BIGDEC = ":db.type/bigdec"
INSTANT = ":db.type/instant"
UUID = ":db.type/uuid"
URI = ":db.type/uri"
KEYWORD = ":db.type/keyword"
REF = ":db.type/ref"
BYTES = ":db.type/bytes"
SYMBOL = ":db.type/symbol"
TUPLE = ":db.type/tuple"


class ValueType(str, Enum):
    """Attribute value types, as written in a schema specification."""

    STRING = "string"
    LONG = "long"
    BOOLEAN = "boolean"
    DOUBLE = "double"
    INSTANT = "instant"
    KEYWORD = "keyword"
    UUID = "uuid"
    REF = "ref"
    BIGDEC = "bigdec"
    BIGINT = "bigint"
    URI = "uri"
    # Only ever read back from an existing schema
    BYTES = "bytes"
    FLOAT = "float"
    SYMBOL = "symbol"
    TUPLE = "tuple"

    def __str__(self) -> str:
        return self.value


class Cardinality(str, Enum):
    ONE = "one"
    MANY = "many"

    def __str__(self) -> str:
        return self.value


class Uniqueness(str, Enum):
    VALUE = "value"
    IDENTITY = "identity"

    def __str__(self) -> str:
        return self.value


_TYPE_TO_DATOMIC: dict[ValueType, str] = {
    ValueType.STRING: STRING,
    ValueType.LONG: LONG,
    ValueType.BOOLEAN: BOOLEAN,
    ValueType.DOUBLE: DOUBLE,
    ValueType.INSTANT: INSTANT,
    ValueType.KEYWORD: KEYWORD,
    ValueType.UUID: UUID,
    ValueType.REF: REF,
    ValueType.BIGDEC: BIGDEC,
    ValueType.BIGINT: BIGINT,
    ValueType.URI: URI,
}

_DATOMIC_TO_TYPE: dict[str, ValueType] = {
    f":db.type/{value_type.value}": value_type for value_type in ValueType
}

_CARDINALITY_TO_DATOMIC: dict[Cardinality, str] = {
    Cardinality.ONE: ONE,
    Cardinality.MANY: MANY,
}

_DATOMIC_TO_CARDINALITY = {v: k for k, v in _CARDINALITY_TO_DATOMIC.items()}

_UNIQUE_TO_DATOMIC: dict[Uniqueness, str] = {
    Uniqueness.IDENTITY: IDENTITY,
    Uniqueness.VALUE: VALUE,
}

_DATOMIC_TO_UNIQUE = {v: k for k, v in _UNIQUE_TO_DATOMIC.items()}


def _tag(value: object) -> object:
    """Canonical lookup key for a tag given as an enum member or string."""
    if isinstance(value, Enum):
        return value.value
    return value


def _ident(value: object) -> str:
    """Datomic identifier with its leading colon, as used by the tables."""
    text = str(value)
    return text if text.startswith(":") else f":{text}"


def to_datomic_type(value_type: ValueType | str) -> str:
    """Return the ``:db.type/*`` identifier for a type tag.

    Raises:
        UnknownTypeError: For tags outside the writable type set, which
            includes the read-only bytes, float, symbol and tuple.
    """
    try:
        return _TYPE_TO_DATOMIC[ValueType(_tag(value_type))]
    except (ValueError, KeyError):
        raise UnknownTypeError(f"Unknown type: {value_type}", token=value_type) from None


def to_datomic_cardinality(cardinality: Cardinality | str) -> str:
    try:
        return _CARDINALITY_TO_DATOMIC[Cardinality(_tag(cardinality))]
    except ValueError:
        raise UnknownCardinalityError(
            f"Unknown cardinality: {cardinality}", token=cardinality
        ) from None


def to_datomic_unique(unique: Uniqueness | str | None) -> str | None:
    """Return the ``:db.unique/*`` identifier, or None when there is no constraint."""
    if unique is None:
        return None
    try:
        return _UNIQUE_TO_DATOMIC[Uniqueness(_tag(unique))]
    except ValueError:
        raise UnknownUniquenessError(
            f"Unknown uniqueness constraint: {unique}", token=unique
        ) from None


def from_datomic_type(datomic_type: str) -> ValueType:
    """Decode ``db.type/string`` or ``:db.type/string`` into a ValueType."""
    try:
        return _DATOMIC_TO_TYPE[_ident(datomic_type)]
    except KeyError:
        raise UnknownTypeError(
            f"Unknown Datomic type: {_ident(datomic_type)}", token=datomic_type
        ) from None


def from_datomic_cardinality(datomic_cardinality: str) -> Cardinality:
    try:
        return _DATOMIC_TO_CARDINALITY[_ident(datomic_cardinality)]
    except KeyError:
        raise UnknownCardinalityError(
            f"Unknown Datomic cardinality: {_ident(datomic_cardinality)}",
            token=datomic_cardinality,
        ) from None


def from_datomic_unique(datomic_unique: str) -> Uniqueness:
    try:
        return _DATOMIC_TO_UNIQUE[_ident(datomic_unique)]
    except KeyError:
        raise UnknownUniquenessError(
            f"Unknown Datomic uniqueness: {_ident(datomic_unique)}",
            token=datomic_unique,
        ) from None
