"""Schema specification <-> Datomic schema transaction data.

A schema specification is a plain mapping from namespace to attribute to
options::

    {
        "movie": {
            "title": {"type": "string", "doc": "The title of the movie."},
            "genres": {"type": "keyword", "cardinality": "many"},
            "imdb_id": {"type": "string", "unique": "identity"},
        }
    }

Options are ``type`` (required), ``cardinality`` (``one`` by default),
``doc``, ``unique``, ``index`` and ``history`` (``True`` by default).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from datomic_flare.edn import Keyword, dumps, loads
from datomic_flare.types import (
    Cardinality,
    from_datomic_cardinality,
    from_datomic_type,
    from_datomic_unique,
    to_datomic_cardinality,
    to_datomic_type,
    to_datomic_unique,
)

# Introspection query whose rows feed datoms_to_specification().
QUERY = """\
[:find
    ?e ?ident ?value_type ?cardinality ?doc
    ?unique ?index ?no_history
 :in $
 :where
   [?e :db/ident ?ident]

   [?e :db/valueType ?value_type_id]
   [?value_type_id :db/ident ?value_type]

   [?e :db/cardinality ?cardinality_id]
   [?cardinality_id :db/ident ?cardinality]

   [(get-else $ ?e :db/doc "") ?doc]

   [(get-else $ ?e :db/unique -1) ?unique_id]
   [(get-else $ ?unique_id :db/ident false) ?unique]

   [(get-else $ ?e :db/index false) ?index]
   [(get-else $ ?e :db/noHistory false) ?no_history]]
"""

# Datomic's own attributes; never part of a user schema.
NON_SCHEMA_NAMESPACES = frozenset(
    {
        "db",
        "db.alter",
        "db.attr",
        "db.bootstrap",
        "db.cardinality",
        "db.entity",
        "db.excise",
        "db.fn",
        "db.install",
        "db.lang",
        "db.part",
        "db.sys",
        "db.type",
        "db.unique",
        "fressian",
    }
)

AttributeSpecification = dict[str, dict[str, dict[str, Any]]]

_IDENT = Keyword("db/ident")
_VALUE_TYPE = Keyword("db/valueType")
_CARDINALITY = Keyword("db/cardinality")
_DOC = Keyword("db/doc")
_UNIQUE = Keyword("db/unique")
_INDEX = Keyword("db/index")
_NO_HISTORY = Keyword("db/noHistory")


def _attribute_to_edn(namespace: str, attribute: str, options: Mapping[str, Any]) -> list[str]:
    fields = [
        f"{{:db/ident       :{namespace}/{attribute}",
        f"  :db/valueType   {to_datomic_type(options.get('type'))}",
        "  :db/cardinality "
        + to_datomic_cardinality(options.get("cardinality") or Cardinality.ONE),
    ]

    if options.get("doc") is not None:
        fields.append(f"  :db/doc         {dumps(str(options['doc']))}")
    if options.get("unique"):
        fields.append(f"  :db/unique      {to_datomic_unique(options['unique'])}")
    if options.get("index"):
        fields.append("  :db/index       true")
    if options.get("history") is False:
        fields.append("  :db/noHistory   true")

    fields[-1] += "}"
    return fields


def specification_to_edn(specification: Mapping[str, Mapping[str, Mapping[str, Any]]]) -> str:
    """Build the schema transaction data for a specification.

    Attributes are emitted in mapping order, one aligned map each,
    separated by a blank line and wrapped in a single vector.

    Raises:
        UnknownTypeError: If an attribute has no type or an unknown one.
        UnknownCardinalityError: On an unknown cardinality.
        UnknownUniquenessError: On an unknown uniqueness constraint.
    """
    attributes = []
    for namespace, namespace_attributes in specification.items():
        for attribute, options in namespace_attributes.items():
            edn = "\n".join(_attribute_to_edn(str(namespace), str(attribute), options))
            attributes.append(edn if not attributes else f" {edn}")

    return "[" + "\n\n".join(attributes) + "]"


def _split_ident(ident: str) -> tuple[str, str | None]:
    namespace, _, attribute = str(ident).lstrip(":").partition("/")
    return namespace, attribute or None


def datoms_to_specification(datoms: Iterable[Sequence[Any]]) -> AttributeSpecification:
    """Rebuild a specification from rows of the introspection :data:`QUERY`.

    Each row is ``[e, ident, value_type, cardinality, doc, unique, index,
    no_history]``. Attributes in Datomic's reserved namespaces, and idents
    without a namespace, are left out.
    """
    specification: AttributeSpecification = {}

    for row in datoms:
        namespace, attribute = _split_ident(row[1])
        if attribute is None or namespace in NON_SCHEMA_NAMESPACES:
            continue

        _, _, value_type, cardinality, doc, unique, index, no_history = row[:8]

        specification.setdefault(namespace, {})[attribute] = {
            "type": from_datomic_type(value_type),
            "cardinality": from_datomic_cardinality(cardinality),
            "doc": doc or None,
            "unique": from_datomic_unique(unique) if unique else False,
            "index": index,
            "history": not no_history,
        }

    return specification


def edn_to_datoms(edn: str) -> list[list[Any]]:
    """Read schema transaction data back into introspection-shaped rows.

    The inverse of :func:`specification_to_edn` up to default filling:
    feeding the result to :func:`datoms_to_specification` yields the
    original specification with ``doc``, ``unique``, ``index`` and
    ``history`` filled in. The entity id column is None since nothing
    has been transacted.
    """
    rows = []
    for attribute in loads(edn) or ():
        unique = attribute.get(_UNIQUE)
        rows.append(
            [
                None,
                str(attribute[_IDENT]),
                str(attribute[_VALUE_TYPE]),
                str(attribute.get(_CARDINALITY, "db.cardinality/one")),
                attribute.get(_DOC, ""),
                str(unique) if unique else False,
                attribute.get(_INDEX, False),
                attribute.get(_NO_HISTORY, False),
            ]
        )
    return rows
