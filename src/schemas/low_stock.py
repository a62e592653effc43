"""Low-stock alert schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import RunSource


class LowStockRunSummary(BaseModel):
    """Body returned by the evaluation trigger."""

    model_config = ConfigDict(populate_by_name=True)

    recipients_count: int = Field(alias="recipientsCount")
    low_count: int = Field(alias="lowCount")
    newly_low_count: int = Field(alias="newlyLowCount")
    sent_threshold: bool = Field(alias="sentThreshold")
    sent_daily: bool = Field(alias="sentDaily")
    error: str | None = None


class LowStockItemResponse(BaseModel):
    """A currently low item with its alert state."""

    item_id: str
    name: str
    category: str | None
    quantity: int
    minimum_quantity: int
    location_name: str | None
    first_low_at: datetime | None
    last_threshold_email_at: datetime | None
    last_daily_digest_local_date: date | None


class LowStockRunLogResponse(BaseModel):
    """Recorded evaluation run."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    run_source: RunSource
    initiated_by: int | None
    ran_at: datetime
    success: bool
    skipped: bool
    local_date: date | None
    recipients_count: int
    low_count: int
    newly_low_count: int
    sent_threshold: bool
    sent_daily: bool
    error_message: str | None
