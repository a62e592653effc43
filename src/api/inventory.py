"""Inventory catalog API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_profile, require_inventory_manager
from src.database import get_db
from src.models.inventory import InventoryItem, InventoryLocation
from src.models.profile import Profile
from src.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
    InventoryLocationCreate,
    InventoryLocationResponse,
)

router = APIRouter(prefix="/api/v1/inventory", tags=["inventory"])


def get_inventory_item(db: Session, item_id: str) -> InventoryItem:
    """Get an inventory item or raise 404."""
    item = db.query(InventoryItem).filter(InventoryItem.id == item_id).first()
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found"
        )
    return item


def ensure_location_exists(db: Session, location_id: int | None) -> None:
    if location_id is None:
        return
    if not db.query(InventoryLocation).filter(InventoryLocation.id == location_id).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")


@router.get("/locations", response_model=list[InventoryLocationResponse])
def list_locations(
    _profile: Annotated[Profile, Depends(get_current_profile)],
    db: Annotated[Session, Depends(get_db)],
):
    """List inventory locations."""
    return db.query(InventoryLocation).order_by(InventoryLocation.name).all()


@router.post(
    "/locations", response_model=InventoryLocationResponse, status_code=status.HTTP_201_CREATED
)
def create_location(
    location_in: InventoryLocationCreate,
    _manager: Annotated[Profile, Depends(require_inventory_manager)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create an inventory location."""
    location = InventoryLocation(**location_in.model_dump())
    db.add(location)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Location '{location_in.name}' already exists",
        ) from None
    db.refresh(location)
    return location


@router.get("/items", response_model=list[InventoryItemResponse])
def list_items(
    _profile: Annotated[Profile, Depends(get_current_profile)],
    db: Annotated[Session, Depends(get_db)],
    include_inactive: bool = False,
):
    """List inventory items ordered by name."""
    query = db.query(InventoryItem)
    if not include_inactive:
        query = query.filter(InventoryItem.is_active.is_(True))
    return query.order_by(InventoryItem.name).all()


@router.post("/items", response_model=InventoryItemResponse, status_code=status.HTTP_201_CREATED)
def create_item(
    item_in: InventoryItemCreate,
    _manager: Annotated[Profile, Depends(require_inventory_manager)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create an inventory item."""
    if db.query(InventoryItem).filter(InventoryItem.id == item_in.id).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Inventory item '{item_in.id}' already exists",
        )
    ensure_location_exists(db, item_in.location_id)

    item = InventoryItem(**item_in.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@router.get("/items/{item_id}", response_model=InventoryItemResponse)
def get_item(
    item_id: str,
    _profile: Annotated[Profile, Depends(get_current_profile)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get an inventory item."""
    return get_inventory_item(db, item_id)


@router.patch("/items/{item_id}", response_model=InventoryItemResponse)
def update_item(
    item_id: str,
    item_update: InventoryItemUpdate,
    _manager: Annotated[Profile, Depends(require_inventory_manager)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update an inventory item.

    Low-stock state is not touched here; the next evaluation picks up the change.
    """
    item = get_inventory_item(db, item_id)

    update_data = item_update.model_dump(exclude_unset=True)
    if "location_id" in update_data:
        ensure_location_exists(db, update_data["location_id"])
    for field, value in update_data.items():
        setattr(item, field, value)

    db.commit()
    db.refresh(item)
    return item
