"""Tests for assertion and retraction encoding."""

from datetime import datetime, timezone

import pytest

from datomic_flare.transacting import (
    MAX_TEMPORARY_IDS,
    TemporaryIds,
    assign_temporary_ids,
    retractions_to_edn,
    transactions_to_edn,
)

GOONIES = {"title": "The Goonies", "genre": "action/adventure", "release_year": 1985}
COMMANDO = {"title": "Commando", "genre": "action/adventure", "release_year": 1985}
REPO_MAN = {"title": "Repo Man", "genre": "punk dystopia", "release_year": 1984}


class TestTransactionsToEdn:
    """Tests for transactions_to_edn()."""

    def test_with_temporary_ids(self):
        transactions = [
            {"_temporary_id": -1, **GOONIES},
            {"_temporary_id": -2, **COMMANDO},
        ]

        assert transactions_to_edn("movie", transactions) == (
            "[{:db/id -1\n"
            '  :movie/title "The Goonies"\n'
            '  :movie/genre "action/adventure"\n'
            "  :movie/release_year 1985}\n"
            " {:db/id -2\n"
            '  :movie/title "Commando"\n'
            '  :movie/genre "action/adventure"\n'
            "  :movie/release_year 1985}]"
        )

    def test_without_ids(self):
        assert transactions_to_edn("movie", [GOONIES, COMMANDO, REPO_MAN]) == (
            '[{:movie/title "The Goonies"\n'
            '  :movie/genre "action/adventure"\n'
            "  :movie/release_year 1985}\n"
            ' {:movie/title "Commando"\n'
            '  :movie/genre "action/adventure"\n'
            "  :movie/release_year 1985}\n"
            ' {:movie/title "Repo Man"\n'
            '  :movie/genre "punk dystopia"\n'
            "  :movie/release_year 1984}]"
        )

    def test_existing_entity_and_reference(self):
        fact = {"_id": 17592186045418, "director": {"_id": 17592186045419}}

        assert transactions_to_edn("movie", [fact]) == (
            "[{:db/id 17592186045418\n  :movie/director {:db/id 17592186045419}}]"
        )

    def test_values_use_edn_literals(self):
        fact = {
            "released_at": datetime(1985, 6, 7, tzinfo=timezone.utc),
            "cult": True,
            "budget": None,
        }

        assert transactions_to_edn("movie", [fact]) == (
            '[{:movie/released_at #inst "1985-06-07T00:00:00.000+00:00"\n'
            "  :movie/cult true\n"
            "  :movie/budget nil}]"
        )

    def test_empty(self):
        assert transactions_to_edn("movie", []) == "[]"


class TestRetractionsToEdn:
    """Tests for retractions_to_edn()."""

    def test_attribute_value_and_entity(self):
        retractions = [
            {"_id": 17592186045428, "genre": None},
            {"_id": 17592186045429, "genre": "future governor"},
            {"_id": 17592186045430},
        ]

        assert retractions_to_edn("movie", retractions) == (
            "[[:db/retract 17592186045428 :movie/genre]\n"
            ' [:db/retract 17592186045429 :movie/genre "future governor"]\n'
            " [:db/retractEntity 17592186045430]]"
        )

    def test_several_attributes_of_one_entity(self):
        retractions = [{"_id": 7, "genre": None, "release_year": 1984}]

        assert retractions_to_edn("movie", retractions) == (
            "[[:db/retract 7 :movie/genre]\n [:db/retract 7 :movie/release_year 1984]]"
        )

    def test_missing_id(self):
        with pytest.raises(KeyError):
            retractions_to_edn("movie", [{"genre": None}])


class TestAssignTemporaryIds:
    """Tests for assign_temporary_ids() and TemporaryIds."""

    def test_new_facts_get_positional_temporary_ids(self):
        prepared, ids = assign_temporary_ids([GOONIES, COMMANDO])

        assert prepared == [
            {**GOONIES, "_temporary_id": -1},
            {**COMMANDO, "_temporary_id": -2},
        ]
        assert list(prepared[0])[-1] == "_temporary_id"
        assert ids.temporary_ids == [-1, -2]

    def test_inputs_are_not_modified(self):
        fact = dict(GOONIES)
        assign_temporary_ids([fact])
        assert fact == GOONIES

    def test_existing_ids_are_kept(self):
        prepared, ids = assign_temporary_ids([{"_id": 42, "title": "x"}, GOONIES])

        assert prepared[0] == {"_id": 42, "title": "x"}
        assert prepared[1]["_temporary_id"] == -2
        assert list(ids) == [(42, True), (-2, False)]
        assert len(ids) == 2

    def test_resolve_in_input_order(self):
        _, ids = assign_temporary_ids([GOONIES, {"_id": 42}, COMMANDO])

        resolved = ids.resolve({"-1": 17592186045418, "-3": 17592186045419})

        assert resolved == [17592186045418, 42, 17592186045419]

    def test_resolve_int_keys(self):
        _, ids = assign_temporary_ids([GOONIES])
        assert ids.resolve({-1: 99}) == [99]

    def test_unresolved_temporary_id_is_none(self):
        _, ids = assign_temporary_ids([GOONIES, COMMANDO])
        assert ids.resolve({"-1": 99}) == [99, None]
        assert ids.resolve(None) == [None, None]

    def test_duplicate_ids_do_not_collapse(self):
        _, ids = assign_temporary_ids([{"_id": 5}, {"_id": 5}])
        assert ids.resolve({}) == [5, 5]

    def test_too_many_temporary_ids(self):
        facts = ({"title": str(i)} for i in range(MAX_TEMPORARY_IDS + 1))
        with pytest.raises(ValueError, match="Too many new entities"):
            assign_temporary_ids(facts)

    def test_empty(self):
        prepared, ids = assign_temporary_ids([])
        assert prepared == []
        assert len(ids) == 0
        assert TemporaryIds().resolve({}) == []
