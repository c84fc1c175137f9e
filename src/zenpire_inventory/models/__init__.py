"""
Database models package.

This package contains the SQLAlchemy ORM models for every business table
that takes part in snapshot export/import.
"""

from .base import Base, BaseModel
from .unit import Unit
from .allergen import Allergen
from .ingredient import Ingredient
from .recipe import Recipe, RecipeComponent, RecipeStep
from .supplier import Supplier, SupplierOffer, SupplierOfferPrice, IngredientSupplierOffer
from .ingredient_stock import IngredientStock

__all__ = [
    "Base",
    "BaseModel",
    "Unit",
    "Allergen",
    "Ingredient",
    "Recipe",
    "RecipeComponent",
    "RecipeStep",
    "Supplier",
    "SupplierOffer",
    "SupplierOfferPrice",
    "IngredientSupplierOffer",
    "IngredientStock",
]
