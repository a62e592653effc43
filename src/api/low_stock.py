"""Low-stock alert API endpoints."""

from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from src.api.dependencies import (
    get_current_profile,
    get_email_sender,
    get_run_lock,
    require_inventory_manager,
    verify_cron_secret,
)
from src.config import Settings, get_settings
from src.database import get_db
from src.models.enums import RunSource
from src.models.low_stock_run_log import LowStockRunLog
from src.models.profile import Profile
from src.schemas.low_stock import LowStockItemResponse, LowStockRunLogResponse, LowStockRunSummary
from src.services.email_service import EmailSender
from src.services.low_stock_service import (
    EvaluationSummary,
    get_low_stock_report,
    run_low_stock_check,
)

router = APIRouter(prefix="/api/v1/inventory/low-stock", tags=["inventory-alerts"])


def summary_response(summary: EvaluationSummary) -> JSONResponse:
    """Map a run summary to its HTTP status."""
    if summary.ok:
        status_code = status.HTTP_200_OK
    elif summary.skipped:
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(status_code=status_code, content=summary.as_dict())


@router.post(
    "/evaluate",
    response_model=LowStockRunSummary,
    dependencies=[Depends(verify_cron_secret)],
)
def evaluate_low_stock(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    sender: Annotated[EmailSender, Depends(get_email_sender)],
    run_lock: Annotated[Callable[[], AbstractContextManager[None]], Depends(get_run_lock)],
):
    """Scheduled trigger: evaluate low stock and send due alerts."""
    summary = run_low_stock_check(
        db, source=RunSource.CRON, settings=settings, sender=sender, lock_factory=run_lock
    )
    return summary_response(summary)


@router.post("/run-now", response_model=LowStockRunSummary)
def run_low_stock_now(
    manager: Annotated[Profile, Depends(require_inventory_manager)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    sender: Annotated[EmailSender, Depends(get_email_sender)],
    run_lock: Annotated[Callable[[], AbstractContextManager[None]], Depends(get_run_lock)],
):
    """Manual trigger from an inventory manager."""
    summary = run_low_stock_check(
        db,
        source=RunSource.MANUAL,
        initiated_by=manager.id,
        settings=settings,
        sender=sender,
        lock_factory=run_lock,
    )
    return summary_response(summary)


@router.get("", response_model=list[LowStockItemResponse])
def list_low_stock(
    _profile: Annotated[Profile, Depends(get_current_profile)],
    db: Annotated[Session, Depends(get_db)],
):
    """List items currently at or below their minimum quantity."""
    return [
        LowStockItemResponse(
            item_id=item.id,
            name=item.name,
            category=item.category,
            quantity=item.quantity,
            minimum_quantity=item.minimum_quantity,
            location_name=item.location.name if item.location else None,
            first_low_at=state.first_low_at if state else None,
            last_threshold_email_at=state.last_threshold_email_at if state else None,
            last_daily_digest_local_date=state.last_daily_digest_local_date if state else None,
        )
        for item, state in get_low_stock_report(db)
    ]


@router.get("/runs", response_model=list[LowStockRunLogResponse])
def list_runs(
    _manager: Annotated[Profile, Depends(require_inventory_manager)],
    db: Annotated[Session, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=200)] = 20,
):
    """List recent evaluation runs, newest first."""
    return (
        db.query(LowStockRunLog)
        .order_by(LowStockRunLog.ran_at.desc(), LowStockRunLog.id.desc())
        .limit(limit)
        .all()
    )
