"""Ingredient stock model - current on-hand quantity per ingredient."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, String
from sqlalchemy.orm import relationship

from zenpire_inventory.utils.datetime_utils import utc_now

from .base import BaseModel


class IngredientStock(BaseModel):
    """
    On-hand stock of an ingredient.

    Attributes:
        ingredient_id: Stocked ingredient
        quantity: Quantity on hand (may be negative after corrections)
        unit_id: Unit of quantity
    """

    __tablename__ = "ingredient_stock"

    ingredient_id = Column(String(36), ForeignKey("ingredient.id"), nullable=False, unique=True)
    quantity = Column(Float, nullable=False, default=0.0)
    unit_id = Column(String(36), ForeignKey("unit.id"), nullable=False)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    ingredient = relationship("Ingredient", back_populates="stock")
