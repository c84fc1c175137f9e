"""
Recipe models.

This module contains:
- Recipe: A preparation producing output_quantity of output_unit
- RecipeComponent: One line of a recipe, either an ingredient or a sub-recipe
- RecipeStep: Ordered preparation instruction
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from zenpire_inventory.utils.datetime_utils import utc_now

from .base import BaseModel


class Recipe(BaseModel):
    """
    Recipe model.

    Attributes:
        name: Recipe name
        description: Optional description
        output_quantity: Quantity produced per batch
        output_unit_id: Unit of output_quantity
        is_active: Soft-delete flag
        is_pre_product: True for intermediate preparations used by other recipes
        image_data: Base64-encoded image payload, optional
        image_mime: MIME type of image_data
    """

    __tablename__ = "recipe"

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    output_quantity = Column(Float, nullable=False, default=1.0)
    output_unit_id = Column(String(36), ForeignKey("unit.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    is_pre_product = Column(Boolean, nullable=False, default=False)

    image_data = Column(Text, nullable=True)
    image_mime = Column(String(100), nullable=True)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    output_unit = relationship("Unit", lazy="select")
    components = relationship(
        "RecipeComponent",
        foreign_keys="RecipeComponent.recipe_id",
        back_populates="recipe",
        order_by="RecipeComponent.sort_order",
        lazy="select",
    )
    steps = relationship(
        "RecipeStep", back_populates="recipe", order_by="RecipeStep.step_no", lazy="select"
    )


class RecipeComponent(BaseModel):
    """
    Recipe line item.

    Exactly one of ingredient_id or sub_recipe_id is set.

    Attributes:
        recipe_id: Owning recipe
        ingredient_id: Ingredient used, or None
        sub_recipe_id: Nested recipe used, or None
        quantity: Amount used (> 0)
        unit_id: Unit of quantity
        sort_order: Display order within the recipe
    """

    __tablename__ = "recipe_component"

    recipe_id = Column(String(36), ForeignKey("recipe.id", ondelete="CASCADE"), nullable=False)
    ingredient_id = Column(String(36), ForeignKey("ingredient.id"), nullable=True)
    sub_recipe_id = Column(String(36), ForeignKey("recipe.id"), nullable=True)
    quantity = Column(Float, nullable=False)
    unit_id = Column(String(36), ForeignKey("unit.id"), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    recipe = relationship("Recipe", foreign_keys=[recipe_id], back_populates="components")
    ingredient = relationship("Ingredient", lazy="select")
    sub_recipe = relationship("Recipe", foreign_keys=[sub_recipe_id], lazy="select")

    __table_args__ = (
        CheckConstraint(
            "(ingredient_id IS NULL) <> (sub_recipe_id IS NULL)",
            name="ck_recipe_component_one_target",
        ),
        CheckConstraint("quantity > 0", name="ck_recipe_component_quantity_positive"),
        Index("idx_recipe_component_recipe", "recipe_id"),
    )

    @property
    def component_type(self) -> str:
        """'ingredient' or 'sub_recipe'."""
        return "ingredient" if self.ingredient_id else "sub_recipe"


class RecipeStep(BaseModel):
    """Numbered preparation instruction of a recipe."""

    __tablename__ = "recipe_step"

    recipe_id = Column(String(36), ForeignKey("recipe.id", ondelete="CASCADE"), nullable=False)
    step_no = Column(Integer, nullable=False)
    instruction_text = Column(Text, nullable=False)

    recipe = relationship("Recipe", back_populates="steps")

    __table_args__ = (UniqueConstraint("recipe_id", "step_no", name="uq_recipe_step_no"),)

    def __repr__(self) -> str:
        return f"RecipeStep(recipe_id={self.recipe_id}, step_no={self.step_no})"
