"""
Supplier models.

This module contains:
- Supplier: A vendor
- SupplierOffer: A purchasable pack offered by a supplier
- SupplierOfferPrice: Price history of an offer
- IngredientSupplierOffer: Link between ingredients and the offers that supply them
"""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import BaseModel


class Supplier(BaseModel):
    """
    Supplier (vendor) model.

    Attributes:
        name: Supplier name
        comment: Optional notes (contact, delivery days, ...)
    """

    __tablename__ = "supplier"

    name = Column(String(200), nullable=False)
    comment = Column(Text, nullable=True)

    offers = relationship("SupplierOffer", back_populates="supplier", lazy="select")


class SupplierOffer(BaseModel):
    """
    A pack sold by a supplier, e.g. "Almond flour 1 kg bag".

    Attributes:
        supplier_id: Selling supplier
        name: Offer description
        pack_quantity: Quantity per pack
        pack_unit_id: Unit of pack_quantity
    """

    __tablename__ = "supplier_offer"

    supplier_id = Column(String(36), ForeignKey("supplier.id"), nullable=False)
    name = Column(String(200), nullable=False)
    pack_quantity = Column(Float, nullable=False, default=1.0)
    pack_unit_id = Column(String(36), ForeignKey("unit.id"), nullable=False)

    supplier = relationship("Supplier", back_populates="offers")
    prices = relationship(
        "SupplierOfferPrice",
        back_populates="supplier_offer",
        order_by="SupplierOfferPrice.valid_from",
        lazy="select",
    )


class SupplierOfferPrice(BaseModel):
    """Price of a supplier offer valid from a given date."""

    __tablename__ = "supplier_offer_price"

    supplier_offer_id = Column(String(36), ForeignKey("supplier_offer.id"), nullable=False)
    price = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="EUR")
    valid_from = Column(DateTime, nullable=False)

    supplier_offer = relationship("SupplierOffer", back_populates="prices")


class IngredientSupplierOffer(BaseModel):
    """Marks a supplier offer as a source for an ingredient."""

    __tablename__ = "ingredient_supplier_offer"

    ingredient_id = Column(String(36), ForeignKey("ingredient.id"), nullable=False)
    supplier_offer_id = Column(String(36), ForeignKey("supplier_offer.id"), nullable=False)
    is_preferred = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("ingredient_id", "supplier_offer_id", name="uq_ingredient_supplier_offer"),
    )
