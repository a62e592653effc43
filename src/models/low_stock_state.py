"""Per-item low-stock alert state."""

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, String, func
from sqlalchemy.orm import backref, relationship

from src.database import Base


class LowStockState(Base):
    """Tracks whether an item is low and which alerts have gone out for it.

    ``first_low_at`` is set exactly while ``is_low`` is true.
    """

    __tablename__ = "inventory_low_stock_state"
    __table_args__ = (
        CheckConstraint(
            "(is_low AND first_low_at IS NOT NULL) OR (NOT is_low AND first_low_at IS NULL)",
            name="ck_low_stock_state_first_low_at",
        ),
    )

    item_id = Column(
        String(64),
        ForeignKey("inventory_items.id", ondelete="CASCADE"),
        primary_key=True,
    )
    is_low = Column(Boolean, nullable=False, default=False, index=True)
    first_low_at = Column(DateTime(timezone=True), nullable=True)
    last_threshold_email_at = Column(DateTime(timezone=True), nullable=True)
    # Set when a threshold send for the current low episode failed
    threshold_send_failed = Column(Boolean, nullable=False, default=False)
    last_daily_digest_local_date = Column(Date, nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Relationships
    item = relationship(
        "InventoryItem",
        backref=backref("low_stock_state", uselist=False, passive_deletes=True),
    )
