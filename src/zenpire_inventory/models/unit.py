"""
Unit model for measurement units.

Units are reference data with no dependencies; every quantity in the
catalog (recipe outputs, component amounts, stock levels, supplier packs)
points at one.
"""

from sqlalchemy import Column, String, Float, CheckConstraint

from .base import BaseModel


class Unit(BaseModel):
    """
    Measurement unit.

    Attributes:
        code: Short code (e.g., "g", "kg", "pc")
        name: Display name (e.g., "Gram")
        unit_type: Dimension (e.g., "mass", "volume", "count")
        factor: Multiplier to the base unit of its dimension (g for mass)
    """

    __tablename__ = "unit"

    code = Column(String(20), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    unit_type = Column(String(20), nullable=False)
    factor = Column(Float, nullable=False, default=1.0)

    __table_args__ = (CheckConstraint("factor > 0", name="ck_unit_factor_positive"),)

    def __repr__(self) -> str:
        return f"Unit(id={self.id}, code='{self.code}', unit_type='{self.unit_type}')"
