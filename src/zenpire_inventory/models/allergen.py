"""Allergen model - reference list of declarable allergens."""

from sqlalchemy import Column, DateTime, String, Text

from zenpire_inventory.utils.datetime_utils import utc_now

from .base import BaseModel


class Allergen(BaseModel):
    """
    Declarable allergen (e.g., "Gluten", "Nuts").

    Attributes:
        name: Allergen name, unique
        comment: Optional free-text note
    """

    __tablename__ = "allergen"

    name = Column(String(100), nullable=False, unique=True)
    comment = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)
