"""SQLAlchemy models."""

from src.models.inventory import InventoryItem, InventoryLocation
from src.models.inventory_alert_recipient import InventoryAlertRecipient
from src.models.low_stock_run_log import LowStockRunLog
from src.models.low_stock_state import LowStockState
from src.models.profile import Profile

__all__ = [
    "Profile",
    "InventoryLocation",
    "InventoryItem",
    "InventoryAlertRecipient",
    "LowStockState",
    "LowStockRunLog",
]
