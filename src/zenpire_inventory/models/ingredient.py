"""
Ingredient model for purchased and produced ingredients.

An ingredient is either bought ("purchased") or made in-house from a
recipe ("produced"). Produced ingredients point at their recipe through
produced_by_recipe_id, while recipes in turn consume ingredients through
recipe components. This is the one circular reference in the schema: the
FK is declared with use_alter so table creation does not need an order,
and snapshot imports defer the column until recipes exist.
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from zenpire_inventory.utils.datetime_utils import utc_now

from .base import BaseModel


class Ingredient(BaseModel):
    """
    Ingredient catalog entry.

    Attributes:
        name: Ingredient name (e.g., "Almond Flour")
        kind: "purchased" or "produced"
        default_unit_id: Unit used for stock and costing
        standard_unit_cost: Cost per default unit, optional
        standard_cost_currency: ISO currency code for the cost (default "EUR")
        produced_by_recipe_id: Recipe that yields this ingredient (produced only)
        image_data: Base64-encoded image payload, optional
        image_mime: MIME type of image_data
    """

    __tablename__ = "ingredient"

    name = Column(String(200), nullable=False, unique=True)
    kind = Column(String(20), nullable=False, default="purchased")
    default_unit_id = Column(String(36), ForeignKey("unit.id"), nullable=False)
    standard_unit_cost = Column(Float, nullable=True)
    standard_cost_currency = Column(String(3), nullable=False, default="EUR")

    # Circular edge: ingredient -> recipe (recipe -> ingredient via components)
    produced_by_recipe_id = Column(
        String(36),
        ForeignKey("recipe.id", use_alter=True, name="fk_ingredient_produced_by_recipe"),
        nullable=True,
    )

    image_data = Column(Text, nullable=True)
    image_mime = Column(String(100), nullable=True)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    default_unit = relationship("Unit", lazy="select")
    produced_by_recipe = relationship(
        "Recipe", foreign_keys=[produced_by_recipe_id], lazy="select"
    )
    stock = relationship("IngredientStock", back_populates="ingredient", lazy="select")

    __table_args__ = (Index("idx_ingredient_produced_by_recipe", "produced_by_recipe_id"),)

    def __repr__(self) -> str:
        return f"Ingredient(id={self.id}, name='{self.name}', kind='{self.kind}')"

    @property
    def is_produced(self) -> bool:
        """True if this ingredient is made from a recipe."""
        return self.produced_by_recipe_id is not None
