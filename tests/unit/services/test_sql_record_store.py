"""
Unit tests for sql_record_store.py.

Tests cover:
- Verbatim reads and writes of plain record dictionaries
- ISO-8601 conversion for DateTime columns
- update_field() keeps updated_at untouched
- purge_all() with the ingredient -> recipe cycle set
- transaction() rollback
- Foreign key enforcement by the database
"""

import pytest
from sqlalchemy.exc import IntegrityError

from zenpire_inventory.services.record_store import StoreError
from zenpire_inventory.services.snapshot_schema import SchemaRegistry, TableSpec
from zenpire_inventory.services.sql_record_store import SqlAlchemyRecordStore, _runs_by_keys

UNITS = [
    {"id": "u-g", "code": "g", "name": "Gram", "unit_type": "mass", "factor": 1.0},
    {"id": "u-pc", "code": "pc", "name": "Piece", "unit_type": "count", "factor": 1.0},
]

ALLERGEN = {
    "id": "a-nuts",
    "name": "Nuts",
    "comment": None,
    "created_at": "2026-01-05T08:05:00",
    "updated_at": "2026-02-01T10:00:00",
}


@pytest.fixture
def sql_store(test_db):
    """SqlAlchemyRecordStore over the test database."""
    return SqlAlchemyRecordStore(session_factory=test_db)


def _ingredient(ingredient_id, produced_by=None):
    return {
        "id": ingredient_id,
        "name": ingredient_id.title(),
        "kind": "produced" if produced_by else "purchased",
        "default_unit_id": "u-g",
        "standard_unit_cost": None,
        "standard_cost_currency": "EUR",
        "produced_by_recipe_id": produced_by,
        "image_data": None,
        "image_mime": None,
        "created_at": "2026-01-06T09:00:00",
        "updated_at": "2026-01-06T09:00:00",
    }


def _recipe(recipe_id):
    return {
        "id": recipe_id,
        "name": recipe_id.title(),
        "description": None,
        "output_quantity": 1.0,
        "output_unit_id": "u-g",
        "is_active": True,
        "is_pre_product": True,
        "image_data": None,
        "image_mime": None,
        "created_at": "2026-01-07T08:00:00",
        "updated_at": "2026-01-07T08:00:00",
    }


class TestSelectAndInsert:
    """Tests for select_all() and insert_many()."""

    def test_roundtrip_units(self, sql_store):
        sql_store.insert_many("unit", UNITS)

        assert sql_store.select_all("unit") == UNITS

    def test_datetime_columns_roundtrip_as_iso(self, sql_store):
        sql_store.insert_many("allergen", [ALLERGEN])

        assert sql_store.select_all("allergen") == [ALLERGEN]

    def test_datetime_with_odd_fraction_digits_accepted(self, sql_store):
        allergen = dict(ALLERGEN, created_at="2026-01-05T08:05:00.12345")

        sql_store.insert_many("allergen", [allergen])

        assert sql_store.select_all("allergen")[0]["created_at"] == "2026-01-05T08:05:00.123450"

    def test_empty_insert_is_noop(self, sql_store):
        sql_store.insert_many("unit", [])

        assert sql_store.select_all("unit") == []

    def test_mixed_key_sets_keep_order(self, sql_store):
        rows = [
            {"id": "u-1", "code": "a", "name": "A", "unit_type": "mass", "factor": 2.0},
            {"id": "u-2", "code": "b", "name": "B", "unit_type": "mass"},
            {"id": "u-3", "code": "c", "name": "C", "unit_type": "mass", "factor": 3.0},
        ]

        sql_store.insert_many("unit", rows)

        stored = sql_store.select_all("unit")
        assert [r["id"] for r in stored] == ["u-1", "u-2", "u-3"]
        assert stored[1]["factor"] == 1.0

    def test_unregistered_table_rejected(self, sql_store):
        with pytest.raises(StoreError, match="not registered for transfer"):
            sql_store.select_all("app_user")

    def test_registered_table_without_model_rejected(self, test_db):
        store = SqlAlchemyRecordStore(
            session_factory=test_db,
            registry=SchemaRegistry(tables=(TableSpec("app_user", 1),)),
        )

        with pytest.raises(StoreError, match="has no database model"):
            store.select_all("app_user")

    def test_foreign_key_enforced(self, sql_store):
        sql_store.insert_many("unit", UNITS)

        with pytest.raises(IntegrityError):
            sql_store.insert_many("ingredient", [_ingredient("i-praline", produced_by="r-missing")])

        assert sql_store.select_all("ingredient") == []

    def test_no_concurrent_reads_with_injected_session_factory(self, sql_store):
        assert sql_store.concurrent_reads is False
        assert sql_store.supports_transactions is True


class TestUpdateField:
    """Tests for update_field()."""

    def test_sets_deferred_reference(self, sql_store):
        sql_store.insert_many("unit", UNITS)
        sql_store.insert_many("ingredient", [_ingredient("i-praline")])
        sql_store.insert_many("recipe", [_recipe("r-praline")])

        sql_store.update_field("ingredient", "i-praline", "produced_by_recipe_id", "r-praline")

        stored = sql_store.select_all("ingredient")[0]
        assert stored["produced_by_recipe_id"] == "r-praline"
        assert stored["updated_at"] == "2026-01-06T09:00:00"

    def test_datetime_value_parsed(self, sql_store):
        sql_store.insert_many("allergen", [ALLERGEN])

        sql_store.update_field("allergen", "a-nuts", "updated_at", "2026-03-01T12:00:00")

        assert sql_store.select_all("allergen")[0]["updated_at"] == "2026-03-01T12:00:00"

    def test_unknown_column_rejected(self, sql_store):
        with pytest.raises(StoreError, match="has no column 'colour'"):
            sql_store.update_field("unit", "u-g", "colour", "red")

    def test_unknown_record_rejected(self, sql_store):
        with pytest.raises(StoreError, match="No unit record with id 'u-x'"):
            sql_store.update_field("unit", "u-x", "name", "Nothing")


class TestPurgeAndTransaction:
    """Tests for purge_all() and transaction()."""

    def test_purge_with_circular_reference(self, sql_store):
        sql_store.insert_many("unit", UNITS)
        sql_store.insert_many("ingredient", [_ingredient("i-praline")])
        sql_store.insert_many("recipe", [_recipe("r-praline")])
        sql_store.update_field("ingredient", "i-praline", "produced_by_recipe_id", "r-praline")

        sql_store.purge_all()

        assert sql_store.select_all("ingredient") == []
        assert sql_store.select_all("recipe") == []
        assert sql_store.select_all("unit") == []

    def test_transaction_commits(self, sql_store):
        with sql_store.transaction():
            sql_store.insert_many("unit", UNITS)

        assert len(sql_store.select_all("unit")) == 2

    def test_transaction_rolls_back(self, sql_store):
        sql_store.insert_many("unit", UNITS[:1])

        with pytest.raises(RuntimeError):
            with sql_store.transaction():
                sql_store.purge_all()
                sql_store.insert_many("unit", UNITS[1:])
                raise RuntimeError("boom")

        assert sql_store.select_all("unit") == UNITS[:1]

    def test_reads_inside_transaction_see_pending_writes(self, sql_store):
        with sql_store.transaction():
            sql_store.insert_many("unit", UNITS)
            assert len(sql_store.select_all("unit")) == 2


class TestRunsByKeys:
    """Tests for splitting rows into uniform executemany batches."""

    def test_groups_consecutive_rows(self):
        params = [{"a": 1}, {"a": 2}, {"a": 3, "b": 1}, {"a": 4}]

        assert _runs_by_keys(params) == [[{"a": 1}, {"a": 2}], [{"a": 3, "b": 1}], [{"a": 4}]]
