"""Data-structure DSL over the Flare API."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from datomic_flare import schema as schema_codec
from datomic_flare.factories import RowFactory, extract_find_vars
from datomic_flare.querying import entity_to_dsl
from datomic_flare.transacting import (
    assign_temporary_ids,
    retractions_to_edn,
    transactions_to_edn,
)

if TYPE_CHECKING:
    from datomic_flare.client import Flare


def _database_input(database: str | None) -> dict[str, Any]:
    selector: dict[str, Any] = {"latest": True}
    if database is not None:
        selector["name"] = database
    return selector


def _transact_payload(data: str, database: str | None) -> dict[str, Any]:
    payload: dict[str, Any] = {"data": data}
    if database is not None:
        payload["connection"] = {"database": {"name": database}}
    return payload


def _as_list(data: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    if isinstance(data, Mapping):
        return [data]
    return list(data)


class DSL:
    """
    High-level operations expressed with plain Python data.

    Every method accepts ``debug=True``, in which case nothing is sent and
    the request that would have been sent is returned instead.

    Example:
        flare = Flare(address="http://localhost:3042")
        flare.dsl.transact_schema({"post": {"title": {"type": "string"}}})
        post_id = flare.dsl.assert_into("post", {"title": "Hello World"})
        flare.dsl.find_by_entity_id(post_id)
        # -> {"post": {"title": "Hello World", "_id": post_id}}
    """

    def __init__(self, client: Flare):
        self.client = client
        self.api = client.api

    def create_database(self, database_name: str, debug: bool = False) -> Any:
        result = self.api.create_database({"name": database_name}, debug=debug)
        return result if debug else result["data"]

    def destroy_database(self, database_name: str, debug: bool = False) -> Any:
        result = self.api.delete_database({"name": database_name}, debug=debug)
        return result if debug else result["data"]

    def databases(self, mode: str | None = None, debug: bool = False) -> Any:
        """
        List database names.

        Args:
            mode: ``"peer"`` or ``"client"``, the mode Flare runs in. When
                None, it is read from Flare's ``meta`` endpoint.
            debug: Return the unsent request instead. Without a ``mode``
                that is the ``meta`` request, since the listing request
                depends on its answer.

        """
        if mode is None:
            if debug:
                return self.client.meta(debug=True)
            mode = self.client.meta()["meta"]["mode"]

        if mode == "peer":
            response = self.api.get_database_names(debug=debug)
        else:
            response = self.api.list_databases(debug=debug)

        return response if debug else response["data"]

    def transact_schema(
        self,
        specification: Mapping[str, Mapping[str, Mapping[str, Any]]],
        database: str | None = None,
        debug: bool = False,
    ) -> Any:
        """Install the attributes of a schema specification."""
        data = schema_codec.specification_to_edn(specification)
        response = self.api.transact(_transact_payload(data, database), debug=debug)
        return response if debug else True

    def schema(self, database: str | None = None, debug: bool = False) -> Any:
        """Read the current user schema back as a specification."""
        payload = {
            "inputs": [{"database": _database_input(database)}],
            "query": schema_codec.QUERY,
        }
        response = self.api.q(payload, debug=debug)
        if debug:
            return response
        return schema_codec.datoms_to_specification(response["data"])

    def assert_into(
        self,
        namespace: str,
        data: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        database: str | None = None,
        raw: bool = False,
        debug: bool = False,
    ) -> Any:
        """
        Assert one fact or a list of facts under ``namespace``.

        Facts with ``_id`` update that entity; the others create new
        entities.

        Returns:
            The entity id of each fact, in input order: a list for list
            input, a single id for a single fact. With ``raw=True`` the full
            transaction response is returned instead.

        """
        facts, ids = assign_temporary_ids(_as_list(data))
        payload = _transact_payload(transactions_to_edn(namespace, facts), database)

        result = self.api.transact(payload, debug=debug)
        if debug or raw:
            return result

        resolved = ids.resolve(result["data"].get("tempids"))
        if isinstance(data, Mapping):
            return resolved[0]
        return resolved

    def retract_from(
        self,
        namespace: str,
        data: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        database: str | None = None,
        debug: bool = False,
    ) -> Any:
        """Retract entities (only ``_id`` given) or attribute values."""
        edn = retractions_to_edn(namespace, _as_list(data))
        response = self.api.transact(_transact_payload(edn, database), debug=debug)
        return response if debug else True

    def query(
        self,
        datalog: str,
        params: Sequence[Any] | None = None,
        database: str | None = None,
        debug: bool = False,
        *,
        row_factory: RowFactory[Any] | None = None,
        columns: Sequence[str] | None = None,
    ) -> Any:
        """
        Run a Datalog query against the database.

        Args:
            datalog: The query text; surrounding whitespace is trimmed.
            params: Extra inputs, bound after the database in ``:in``.
            database: Database name; Flare's default when None.
            debug: Return the unsent request instead.
            row_factory: Optional factory applied to every result row.
            columns: Column names for the row factory. Extracted from the
                :find clause when not given.

        Returns:
            The result rows, transformed by ``row_factory`` if given.

        Raises:
            TypeError: If ``params`` is not a list or tuple.

        """
        inputs: list[Any] = [{"database": _database_input(database)}]

        if params is not None:
            if not isinstance(params, (list, tuple)):
                raise TypeError(f"Unexpected params: [{type(params).__name__}] {params!r}")
            inputs.extend(params)

        query = datalog.strip()
        response = self.api.q({"inputs": inputs, "query": query}, debug=debug)
        if debug:
            return response

        rows = response["data"]
        if row_factory is None:
            return rows

        if columns is None:
            columns = extract_find_vars(query)
        return [row_factory(row, columns) for row in rows]

    def find_by_entity_id(
        self, entity_id: int, database: str | None = None, debug: bool = False
    ) -> Any:
        """Fetch an entity as ``{namespace: {attribute: value, "_id": id}}``."""
        response = self.api.entity(
            {"database": _database_input(database), "id": entity_id}, debug=debug
        )
        if debug:
            return response
        return entity_to_dsl(response["data"])
