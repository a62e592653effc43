"""FastAPI dependencies for authentication, settings and collaborators."""

from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.config import Settings, get_settings
from src.database import get_db
from src.models.profile import Profile
from src.services.auth import decode_access_token
from src.services.email_service import EmailSender, ResendEmailSender
from src.services.run_lock import low_stock_run_lock

security = HTTPBearer()


def get_current_profile(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> Profile:
    """Get the profile identified by the bearer token."""
    payload = decode_access_token(credentials.credentials)

    if payload is None or payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        profile_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Profile not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return profile


def require_inventory_manager(
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> Profile:
    """Allow only owners, office admins and mechanics."""
    if not profile.role.can_manage_inventory():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inventory management requires owner, office_admin or mechanic role",
        )
    return profile


def verify_cron_secret(
    settings: Annotated[Settings, Depends(get_settings)],
    x_cron_secret: Annotated[str | None, Header()] = None,
) -> None:
    """Check the scheduler's shared secret when one is configured."""
    if settings.cron_secret and x_cron_secret != settings.cron_secret:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid cron secret")


def get_email_sender(settings: Annotated[Settings, Depends(get_settings)]) -> EmailSender:
    """Get the transactional email sender."""
    return ResendEmailSender.from_settings(settings)


def get_run_lock() -> Callable[[], AbstractContextManager[None]]:
    """Get the low-stock run lock factory."""
    return low_stock_run_lock
