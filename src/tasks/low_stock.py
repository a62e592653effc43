"""Celery tasks for inventory low-stock alerts."""

import logging

from sqlalchemy.orm import Session

from src.celery_app import app as celery_app
from src.database import SessionLocal
from src.models.enums import RunSource
from src.services.low_stock_service import EvaluationSummary, run_low_stock_check

logger = logging.getLogger(__name__)


@celery_app.task
def evaluate_low_stock() -> dict:
    """Evaluate low-stock state and send due alert emails.

    Runs on the celery-beat schedule. Failures are reported in the returned
    summary; the next scheduled run retries from current quantities.

    Returns:
        dict with the run summary
    """
    db: Session = SessionLocal()

    try:
        summary = run_low_stock_check(db, source=RunSource.CRON)
        return summary.as_dict()

    except Exception as e:
        logger.error(f"Error evaluating low stock: {e}", exc_info=True)
        db.rollback()
        return EvaluationSummary(error=str(e)).as_dict()

    finally:
        db.close()
