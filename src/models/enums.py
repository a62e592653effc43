"""Enums for model fields."""

from enum import Enum


class ProfileRole(str, Enum):
    """Roles assigned to employee profiles."""

    OWNER = "owner"
    OFFICE_ADMIN = "office_admin"
    MECHANIC = "mechanic"
    OPERATIONS_MANAGER = "operations_manager"
    TEAM_LEAD = "team_lead"
    EMPLOYEE = "employee"

    def can_manage_inventory(self) -> bool:
        """Check if this role may change inventory and alert settings."""
        return self in (ProfileRole.OWNER, ProfileRole.OFFICE_ADMIN, ProfileRole.MECHANIC)


class RunSource(str, Enum):
    """What started a low-stock evaluation run."""

    CRON = "cron"
    MANUAL = "manual"
