"""Inventory catalog models."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class InventoryLocation(Base, TimestampMixin):
    """Physical place where inventory is kept (shop, truck, trailer)."""

    __tablename__ = "inventory_locations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    location_type = Column(String(50), nullable=True, index=True)
    notes = Column(String, nullable=True)


class InventoryItem(Base, TimestampMixin):
    """Quantity-tracked inventory item."""

    __tablename__ = "inventory_items"

    id = Column(String(64), primary_key=True)  # Externally assigned, e.g. "OIL-5W30"
    external_id = Column(String(100), nullable=True)
    name = Column(String(255), nullable=False, index=True)
    category = Column(String(100), nullable=True, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    minimum_quantity = Column(Integer, nullable=False, default=0)
    location_id = Column(
        Integer,
        ForeignKey("inventory_locations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    supplier = Column(String(255), nullable=True)
    supplier_link = Column(String(500), nullable=True)
    notes = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    # Relationships
    location = relationship("InventoryLocation", backref="items")

    @property
    def is_low(self) -> bool:
        """Check if the item is at or below its minimum quantity."""
        return self.quantity <= self.minimum_quantity
