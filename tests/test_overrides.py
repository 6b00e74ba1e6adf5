"""Tests for database-selector override injection."""

import pytest

from datomic_flare.exceptions import PayloadShapeError, UnrecognizedOperationError
from datomic_flare.overrides import (
    PASSTHROUGH_PATHS,
    OverridePolicy,
    apply_dangerous_overrides_to_payload,
    inject_overrides_into_selector,
)

PURPLE = OverridePolicy.from_mapping({"database": {"name": "purple", "as_of": 13194139534323}})


class TestOverridePolicy:
    """Tests for OverridePolicy."""

    def test_fields(self):
        assert PURPLE.connection_fields == {"name": "purple"}
        assert PURPLE.database_fields == {"name": "purple", "as_of": 13194139534323}

    def test_unknown_fields_are_ignored(self):
        policy = OverridePolicy.from_mapping({"database": {"color": "red"}})
        assert policy.database_fields == {}
        assert not policy

    def test_empty(self):
        assert not OverridePolicy.from_mapping(None)
        assert not OverridePolicy()

    def test_is_read_only(self):
        with pytest.raises(TypeError):
            PURPLE.database["name"] = "blue"

    def test_source_mapping_is_copied(self):
        source = {"database": {"name": "purple"}}
        policy = OverridePolicy.from_mapping(source)
        source["database"]["name"] = "blue"
        assert policy.connection_fields == {"name": "purple"}

    def test_from_policy(self):
        assert OverridePolicy.from_mapping(PURPLE) is PURPLE


class TestApply:
    """Tests for apply_dangerous_overrides_to_payload()."""

    @pytest.mark.parametrize("path", sorted(PASSTHROUGH_PATHS))
    def test_passthrough(self, path):
        payload = {"name": "supernova"}
        assert apply_dangerous_overrides_to_payload(path, PURPLE, payload) is payload

    def test_transact_only_gets_name(self):
        payload = {"data": "[]"}

        result = apply_dangerous_overrides_to_payload("datomic/transact", PURPLE, payload)

        assert result == {"data": "[]", "connection": {"database": {"name": "purple"}}}
        assert payload == {"data": "[]"}

    def test_transact_replaces_name(self):
        payload = {"data": "[]", "connection": {"database": {"name": "blue"}}}

        result = apply_dangerous_overrides_to_payload("datomic/transact", PURPLE, payload)

        assert result["connection"] == {"database": {"name": "purple"}}
        assert payload["connection"] == {"database": {"name": "blue"}}

    @pytest.mark.parametrize(
        "connection",
        [None, {}, {"database": None}, {"database": {}}],
    )
    def test_transact_creates_missing_connection(self, connection):
        payload = {"data": "[]", "connection": connection}

        result = apply_dangerous_overrides_to_payload("datomic/transact", PURPLE, payload)

        assert result == {"data": "[]", "connection": {"database": {"name": "purple"}}}
        assert payload["connection"] == connection

    @pytest.mark.parametrize("path", ["datomic/entity", "datomic/datoms"])
    def test_database_selector(self, path):
        payload = {"database": {"latest": True}, "id": 17592186045430}

        result = apply_dangerous_overrides_to_payload(path, PURPLE, payload)

        assert result == {
            "database": {"name": "purple", "as_of": 13194139534323},
            "id": 17592186045430,
        }
        assert payload["database"] == {"latest": True}

    def test_query_first_database_input(self):
        payload = {
            "inputs": [{"database": {"latest": True}}, "Commando"],
            "query": "[:find ?e :in $ ?title]",
        }

        result = apply_dangerous_overrides_to_payload("datomic/q", PURPLE, payload)

        assert result["inputs"] == [
            {"database": {"name": "purple", "as_of": 13194139534323}},
            "Commando",
        ]
        assert payload["inputs"][0] == {"database": {"latest": True}}

    def test_query_database_input_not_first(self):
        payload = {"inputs": ["Commando", {"database": {}}], "query": "[]"}

        result = apply_dangerous_overrides_to_payload("datomic/q", PURPLE, payload)

        assert result["inputs"][1] == {"database": {"name": "purple", "as_of": 13194139534323}}

    def test_query_tuple_inputs(self):
        payload = {"inputs": ({"database": {"latest": True}},), "query": "[]"}

        result = apply_dangerous_overrides_to_payload("datomic/q", PURPLE, payload)

        assert result["inputs"] == [{"database": {"name": "purple", "as_of": 13194139534323}}]

    def test_query_without_database_input(self):
        with pytest.raises(PayloadShapeError):
            apply_dangerous_overrides_to_payload("datomic/q", PURPLE, {"inputs": ["x"], "query": "[]"})

    def test_query_without_inputs(self):
        with pytest.raises(PayloadShapeError):
            apply_dangerous_overrides_to_payload("datomic/q", PURPLE, {"query": "[]"})

    def test_empty_policy_changes_nothing(self):
        payload = {"inputs": ["x"], "query": "[]"}
        for path in ("datomic/transact", "datomic/entity", "datomic/datoms", "datomic/q"):
            assert apply_dangerous_overrides_to_payload(path, OverridePolicy(), payload) is payload

    def test_unknown_path(self):
        with pytest.raises(UnrecognizedOperationError, match="Unexpected path: 'datomic/nope'"):
            apply_dangerous_overrides_to_payload("datomic/nope", PURPLE, {})

    def test_unknown_path_with_empty_policy(self):
        with pytest.raises(UnrecognizedOperationError):
            apply_dangerous_overrides_to_payload("datomic/nope", OverridePolicy(), {})


class TestSelector:
    """Tests for inject_overrides_into_selector()."""

    def test_as_of_removes_latest(self):
        policy = OverridePolicy.from_mapping({"database": {"as_of": 10}})
        assert inject_overrides_into_selector(policy, {"latest": True, "name": "x"}) == {
            "name": "x",
            "as_of": 10,
        }

    def test_latest_removes_as_of(self):
        policy = OverridePolicy.from_mapping({"database": {"latest": True}})
        assert inject_overrides_into_selector(policy, {"as_of": 10}) == {"latest": True}

    def test_name_only_keeps_time_basis(self):
        policy = OverridePolicy.from_mapping({"database": {"name": "purple"}})
        assert inject_overrides_into_selector(policy, {"latest": True}) == {
            "latest": True,
            "name": "purple",
        }

    def test_none_selector(self):
        assert inject_overrides_into_selector(PURPLE, None) == {
            "name": "purple",
            "as_of": 13194139534323,
        }
