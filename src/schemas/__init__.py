"""Pydantic schemas for API requests and responses."""

from src.schemas.alert_recipient import (
    AlertRecipientCreate,
    AlertRecipientResponse,
    AlertRecipientUpdate,
)
from src.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
    InventoryLocationCreate,
    InventoryLocationResponse,
)
from src.schemas.low_stock import LowStockItemResponse, LowStockRunLogResponse, LowStockRunSummary

__all__ = [
    "InventoryLocationCreate",
    "InventoryLocationResponse",
    "InventoryItemCreate",
    "InventoryItemUpdate",
    "InventoryItemResponse",
    "AlertRecipientCreate",
    "AlertRecipientUpdate",
    "AlertRecipientResponse",
    "LowStockRunSummary",
    "LowStockItemResponse",
    "LowStockRunLogResponse",
]
