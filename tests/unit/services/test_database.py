"""Tests for database session management and the ORM models."""

import pytest
from sqlalchemy.exc import IntegrityError

from zenpire_inventory.models import Allergen, Ingredient, Recipe, RecipeComponent, Unit
from zenpire_inventory.services.database import session_scope, verify_database


class TestSessionScope:
    """Tests for session_scope()."""

    def test_commits_on_success(self, test_db):
        with session_scope() as session:
            session.add(Unit(code="g", name="Gram", unit_type="mass"))

        with session_scope() as session:
            unit = session.query(Unit).one()
            assert len(unit.id) == 36
            assert unit.factor == 1.0

    def test_rolls_back_on_error(self, test_db):
        with pytest.raises(RuntimeError):
            with session_scope() as session:
                session.add(Unit(code="g", name="Gram", unit_type="mass"))
                session.flush()
                raise RuntimeError("boom")

        with session_scope() as session:
            assert session.query(Unit).count() == 0

    def test_verify_database(self, test_db):
        assert verify_database() is True


class TestModels:
    """Tests for model constraints and helpers."""

    def test_to_dict_uses_iso_timestamps(self, test_db):
        with session_scope() as session:
            session.add(Allergen(id="a-nuts", name="Nuts"))

        with session_scope() as session:
            data = session.get(Allergen, "a-nuts").to_dict()

        assert data["id"] == "a-nuts"
        assert isinstance(data["created_at"], str)
        assert data["comment"] is None

    def test_unit_factor_must_be_positive(self, test_db):
        with pytest.raises(IntegrityError):
            with session_scope() as session:
                session.add(Unit(code="x", name="Broken", unit_type="mass", factor=0))

    def test_component_needs_exactly_one_target(self, test_db):
        with session_scope() as session:
            session.add(Unit(id="u-g", code="g", name="Gram", unit_type="mass"))
            session.add(Recipe(id="r-1", name="Base", output_unit_id="u-g"))
            session.add(Ingredient(id="i-1", name="Sugar", default_unit_id="u-g"))

        with pytest.raises(IntegrityError):
            with session_scope() as session:
                session.add(
                    RecipeComponent(
                        recipe_id="r-1",
                        ingredient_id="i-1",
                        sub_recipe_id="r-1",
                        quantity=1.0,
                        unit_id="u-g",
                    )
                )

    def test_repr(self):
        assert repr(Allergen(id="a-nuts", name="Nuts")) == "Allergen(id=a-nuts, name='Nuts')"
        assert repr(Unit(id="u-g", code="g", unit_type="mass")) == "Unit(id=u-g, code='g', unit_type='mass')"
