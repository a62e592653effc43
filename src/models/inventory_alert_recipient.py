"""Low-stock alert recipient model."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class InventoryAlertRecipient(Base, TimestampMixin):
    """Profile subscribed to inventory low-stock emails."""

    __tablename__ = "inventory_alert_recipients"

    profile_id = Column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True
    )
    is_enabled = Column(Boolean, nullable=False, default=True)

    # Relationships
    profile = relationship("Profile", backref="inventory_alert_subscription")
