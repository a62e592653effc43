"""Inventory alert recipient schemas."""

from datetime import datetime

from pydantic import BaseModel


class AlertRecipientCreate(BaseModel):
    """Subscribe a profile to low-stock emails."""

    profile_id: int
    is_enabled: bool = True


class AlertRecipientUpdate(BaseModel):
    """Enable or disable a recipient."""

    is_enabled: bool


class AlertRecipientResponse(BaseModel):
    """Alert recipient with profile contact details."""

    profile_id: int
    email: str | None
    full_name: str | None
    is_enabled: bool
    created_at: datetime
