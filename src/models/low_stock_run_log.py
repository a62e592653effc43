"""Audit log of low-stock evaluation runs."""

from sqlalchemy import Boolean, Column, Date, DateTime, Enum, ForeignKey, Integer, String, func

from src.database import Base
from src.models.enums import RunSource


class LowStockRunLog(Base):
    """One row per low-stock evaluation attempt."""

    __tablename__ = "low_stock_run_logs"

    id = Column(Integer, primary_key=True, index=True)
    run_source = Column(
        Enum(
            RunSource,
            name="runsource",
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    initiated_by = Column(
        Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    ran_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    success = Column(Boolean, nullable=False, default=False)
    skipped = Column(Boolean, nullable=False, default=False)
    local_date = Column(Date, nullable=True)
    recipients_count = Column(Integer, nullable=False, default=0)
    low_count = Column(Integer, nullable=False, default=0)
    newly_low_count = Column(Integer, nullable=False, default=0)
    sent_threshold = Column(Boolean, nullable=False, default=False)
    sent_daily = Column(Boolean, nullable=False, default=False)
    error_message = Column(String, nullable=True)
