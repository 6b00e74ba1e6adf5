"""Raw Flare API: one method per operation, payloads passed through as given."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from datomic_flare.client import Flare


class API:
    """Low-level access to Flare operations.

    Payloads are sent as given (apart from the client's overrides) and the
    full JSON response, ``{"data": ..., "meta": ...}``, is returned.
    """

    def __init__(self, client: Flare):
        self.client = client

    def create_database(self, payload: dict[str, Any], debug: bool = False) -> Any:
        return self.client.request("datomic/create-database", payload, debug=debug)

    def delete_database(self, payload: dict[str, Any], debug: bool = False) -> Any:
        return self.client.request(
            "datomic/delete-database", payload, request_method="DELETE", debug=debug
        )

    def transact(self, payload: dict[str, Any], debug: bool = False) -> Any:
        """Transact ``payload["data"]``, an EDN string of transaction data."""
        return self.client.request("datomic/transact", payload, debug=debug)

    def entity(self, payload: dict[str, Any], debug: bool = False) -> Any:
        return self.client.request("datomic/entity", payload, request_method="GET", debug=debug)

    def datoms(self, payload: dict[str, Any], debug: bool = False) -> Any:
        """Raw index access, e.g. ``{"database": {"latest": True}, "index": "eavt"}``."""
        return self.client.request("datomic/datoms", payload, request_method="GET", debug=debug)

    def get_database_names(self, debug: bool = False) -> Any:
        """List databases when Flare runs as a Datomic peer."""
        return self.client.request("datomic/get-database-names", request_method="GET", debug=debug)

    def list_databases(self, debug: bool = False) -> Any:
        """List databases when Flare runs as a Datomic client."""
        return self.client.request("datomic/list-databases", request_method="GET", debug=debug)

    def q(self, payload: dict[str, Any], debug: bool = False) -> Any:
        """Run ``payload["query"]`` against ``payload["inputs"]``."""
        return self.client.request("datomic/q", payload, request_method="GET", debug=debug)
