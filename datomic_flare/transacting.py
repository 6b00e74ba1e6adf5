"""Assertions and retractions <-> Datomic transaction data."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from datomic_flare.edn import dumps

ID_KEY = "_id"
TEMPORARY_ID_KEY = "_temporary_id"

# Within one transaction, tempids -1 to -1000000 inclusive are reserved
# for user-created temporary ids.
MAX_TEMPORARY_IDS = 1_000_000


def _fact_to_edn(namespace: str, fact: Mapping[str, Any]) -> str:
    lines = []
    for attribute, value in fact.items():
        if attribute in (ID_KEY, TEMPORARY_ID_KEY):
            ident = ":db/id"
        else:
            ident = f":{namespace}/{attribute}"
        lines.append(f"{ident} {dumps(value)}")
    return "{" + "\n  ".join(lines) + "}"


def transactions_to_edn(namespace: str, transactions: Iterable[Mapping[str, Any]]) -> str:
    """Build transaction data asserting each fact under ``namespace``.

    ``_id`` and ``_temporary_id`` both become ``:db/id``; every other key
    becomes ``:<namespace>/<key>``. Keys keep their insertion order.

        >>> print(transactions_to_edn("post", [{"title": "Hi", "_temporary_id": -1}]))
        [{:post/title "Hi"
          :db/id -1}]
    """
    return "[" + "\n ".join(_fact_to_edn(str(namespace), fact) for fact in transactions) + "]"


def _retraction_to_edn(namespace: str, retraction: Mapping[str, Any]) -> list[str]:
    eid = retraction[ID_KEY]
    attributes = {k: v for k, v in retraction.items() if k != ID_KEY}

    if not attributes:
        return [f"[:db/retractEntity {eid}]"]

    forms = []
    for attribute, value in attributes.items():
        if value is None:
            forms.append(f"[:db/retract {eid} :{namespace}/{attribute}]")
        else:
            forms.append(f"[:db/retract {eid} :{namespace}/{attribute} {dumps(value)}]")
    return forms


def retractions_to_edn(namespace: str, retractions: Iterable[Mapping[str, Any]]) -> str:
    """Build transaction data retracting entities or attribute values.

    A retraction with only ``_id`` retracts the whole entity. Otherwise each
    attribute is retracted; a None value retracts whatever value the
    attribute holds, any other value retracts that specific datom.
    """
    forms = []
    for retraction in retractions:
        forms.extend(_retraction_to_edn(str(namespace), retraction))
    return "[" + "\n ".join(forms) + "]"


class TemporaryIds:
    """Ordered association of input facts to the ids they will resolve to.

    One slot per fact, in input order: ``(eid, True)`` for facts that
    already carry ``_id`` and ``(tempid, False)`` for new ones.
    """

    __slots__ = ("_slots",)

    def __init__(self, slots: Sequence[tuple[int, bool]] = ()):
        self._slots = tuple(slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self):
        return iter(self._slots)

    @property
    def temporary_ids(self) -> list[int]:
        return [eid for eid, known in self._slots if not known]

    def resolve(self, tempids: Mapping[Any, Any] | None) -> list[Any]:
        """Map a transaction result's tempid table onto the input facts.

        Keys may be ints or the strings JSON turns them into. A temporary
        id absent from the table resolves to None.
        """
        permanent = {int(k): v for k, v in (tempids or {}).items()}
        return [eid if known else permanent.get(eid) for eid, known in self._slots]


def assign_temporary_ids(
    facts: Iterable[Mapping[str, Any]],
) -> tuple[list[dict[str, Any]], TemporaryIds]:
    """Give every fact without ``_id`` a temporary id (-1, -2, ...).

    The temporary id is keyed by the fact's position, so the n-th fact
    always gets ``-n``. Facts are copied, never modified.

    Raises:
        ValueError: If more facts need a temporary id than Datomic reserves.
    """
    prepared = []
    slots = []
    for i, fact in enumerate(facts):
        if ID_KEY in fact:
            slots.append((fact[ID_KEY], True))
            prepared.append(dict(fact))
            continue
        temporary_id = -(i + 1)
        if -temporary_id > MAX_TEMPORARY_IDS:
            raise ValueError(
                f"Too many new entities in one transaction (limit {MAX_TEMPORARY_IDS})"
            )
        slots.append((temporary_id, False))
        prepared.append({**fact, TEMPORARY_ID_KEY: temporary_id})

    return prepared, TemporaryIds(slots)
