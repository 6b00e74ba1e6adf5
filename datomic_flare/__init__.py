__version__ = "1.0.0"

from datomic_flare.api import API
from datomic_flare.client import Flare, new
from datomic_flare.config import FlareConfig, RequestOptions
from datomic_flare.dsl import DSL
from datomic_flare.edn import Keyword, dumps as edn_dumps, loads as edn_loads
from datomic_flare.exceptions import (
    EDNParseError,
    EncodingError,
    FlareConnectionError,
    FlareError,
    PayloadShapeError,
    RequestError,
    UnknownCardinalityError,
    UnknownTypeError,
    UnknownUniquenessError,
    UnrecognizedOperationError,
    UnsupportedValueError,
)
from datomic_flare.factories import dataclass_row, dict_row, namedtuple_row, tuple_row
from datomic_flare.overrides import OverridePolicy
from datomic_flare.querying import entity_to_dsl
from datomic_flare.schema import datoms_to_specification, specification_to_edn
from datomic_flare.transacting import retractions_to_edn, transactions_to_edn
from datomic_flare.types import (
    BIGDEC,
    BIGINT,
    BOOLEAN,
    DOUBLE,
    IDENTITY,
    INSTANT,
    KEYWORD,
    LONG,
    MANY,
    ONE,
    REF,
    STRING,
    URI,
    UUID,
    VALUE,
    Cardinality,
    Uniqueness,
    ValueType,
)

__all__ = [
    # Client
    "Flare",
    "new",
    "API",
    "DSL",
    "FlareConfig",
    "RequestOptions",
    "OverridePolicy",
    # EDN
    "Keyword",
    "edn_dumps",
    "edn_loads",
    # Codecs
    "specification_to_edn",
    "datoms_to_specification",
    "transactions_to_edn",
    "retractions_to_edn",
    "entity_to_dsl",
    # Row factories
    "tuple_row",
    "dict_row",
    "namedtuple_row",
    "dataclass_row",
    # Schema vocabulary
    "ValueType",
    "Cardinality",
    "Uniqueness",
    "ONE",
    "MANY",
    "STRING",
    "BOOLEAN",
    "LONG",
    "BIGINT",
    "DOUBLE",
    "BIGDEC",
    "INSTANT",
    "UUID",
    "URI",
    "KEYWORD",
    "REF",
    "IDENTITY",
    "VALUE",
    # Exceptions
    "FlareError",
    "EncodingError",
    "UnsupportedValueError",
    "UnknownTypeError",
    "UnknownCardinalityError",
    "UnknownUniquenessError",
    "PayloadShapeError",
    "UnrecognizedOperationError",
    "RequestError",
    "FlareConnectionError",
    "EDNParseError",
    # Version
    "__version__",
]
