"""Inventory alert recipient API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.api.dependencies import require_inventory_manager
from src.database import get_db
from src.models.inventory_alert_recipient import InventoryAlertRecipient
from src.models.profile import Profile
from src.schemas.alert_recipient import (
    AlertRecipientCreate,
    AlertRecipientResponse,
    AlertRecipientUpdate,
)

router = APIRouter(prefix="/api/v1/inventory/alert-recipients", tags=["inventory-alerts"])


def to_response(recipient: InventoryAlertRecipient) -> AlertRecipientResponse:
    return AlertRecipientResponse(
        profile_id=recipient.profile_id,
        email=recipient.profile.email,
        full_name=recipient.profile.full_name,
        is_enabled=recipient.is_enabled,
        created_at=recipient.created_at,
    )


def get_recipient(db: Session, profile_id: int) -> InventoryAlertRecipient:
    recipient = (
        db.query(InventoryAlertRecipient)
        .filter(InventoryAlertRecipient.profile_id == profile_id)
        .first()
    )
    if not recipient:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipient not found")
    return recipient


@router.get("", response_model=list[AlertRecipientResponse])
def list_recipients(
    _manager: Annotated[Profile, Depends(require_inventory_manager)],
    db: Annotated[Session, Depends(get_db)],
):
    """List low-stock alert recipients."""
    recipients = (
        db.query(InventoryAlertRecipient)
        .join(Profile)
        .order_by(Profile.email)
        .all()
    )
    return [to_response(r) for r in recipients]


@router.post("", response_model=AlertRecipientResponse, status_code=status.HTTP_201_CREATED)
def add_recipient(
    recipient_in: AlertRecipientCreate,
    _manager: Annotated[Profile, Depends(require_inventory_manager)],
    db: Annotated[Session, Depends(get_db)],
):
    """Subscribe a profile. Re-adding an existing recipient updates its enabled flag."""
    profile = db.query(Profile).filter(Profile.id == recipient_in.profile_id).first()
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    if not profile.email or not profile.email.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Profile has no email address",
        )

    recipient = (
        db.query(InventoryAlertRecipient)
        .filter(InventoryAlertRecipient.profile_id == profile.id)
        .first()
    )
    if recipient:
        recipient.is_enabled = recipient_in.is_enabled
    else:
        recipient = InventoryAlertRecipient(
            profile_id=profile.id, is_enabled=recipient_in.is_enabled
        )
        db.add(recipient)

    db.commit()
    db.refresh(recipient)
    return to_response(recipient)


@router.patch("/{profile_id}", response_model=AlertRecipientResponse)
def update_recipient(
    profile_id: int,
    recipient_update: AlertRecipientUpdate,
    _manager: Annotated[Profile, Depends(require_inventory_manager)],
    db: Annotated[Session, Depends(get_db)],
):
    """Enable or disable a recipient."""
    recipient = get_recipient(db, profile_id)
    recipient.is_enabled = recipient_update.is_enabled
    db.commit()
    db.refresh(recipient)
    return to_response(recipient)


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipient(
    profile_id: int,
    _manager: Annotated[Profile, Depends(require_inventory_manager)],
    db: Annotated[Session, Depends(get_db)],
):
    """Remove a recipient."""
    recipient = get_recipient(db, profile_id)
    db.delete(recipient)
    db.commit()
