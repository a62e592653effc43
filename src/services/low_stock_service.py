"""Low-stock evaluation: per-item state tracking and alert emails.

Each run classifies every active item, brings ``inventory_low_stock_state`` in
line with the classification and sends at most two emails:

* a threshold alert for items that just went low, and
* a daily digest of everything low, once per business-local day, inside the
  morning digest window.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from src.config import Settings, get_settings
from src.models import (
    InventoryAlertRecipient,
    InventoryItem,
    LowStockRunLog,
    LowStockState,
    Profile,
)
from src.models.enums import RunSource
from src.services.email_service import (
    EmailSender,
    EmailSendError,
    ResendEmailSender,
    build_daily_digest_email,
    build_threshold_email,
)
from src.services.run_lock import RunInProgressError, low_stock_run_lock

logger = logging.getLogger(__name__)


class LowStockConfigError(Exception):
    """Raised when required alert configuration is missing or invalid."""


@dataclass(frozen=True)
class LowStockAlertConfig:
    """Everything the evaluator needs from the environment."""

    resend_api_key: str
    alert_from_email: str
    organization_name: str = "Outdoor Independence"
    business_timezone: str = "America/Chicago"
    digest_hour: int = 9
    digest_window_minutes: int = 15

    @classmethod
    def from_settings(cls, settings: Settings) -> "LowStockAlertConfig":
        """Build the config, failing fast on missing values.

        Raises:
            LowStockConfigError: if the email credentials or timezone are unusable
        """
        missing = [
            name
            for name, value in (
                ("RESEND_API_KEY", settings.resend_api_key),
                ("ALERT_FROM_EMAIL", settings.alert_from_email),
            )
            if not value
        ]
        if missing:
            raise LowStockConfigError(
                f"Missing required env vars for inventory low-stock email: {', '.join(missing)}"
            )

        try:
            ZoneInfo(settings.business_timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise LowStockConfigError(
                f"Unknown BUSINESS_TIMEZONE: {settings.business_timezone}"
            ) from e

        return cls(
            resend_api_key=settings.resend_api_key,
            alert_from_email=settings.alert_from_email,
            organization_name=settings.organization_name,
            business_timezone=settings.business_timezone,
            digest_hour=settings.digest_hour,
            digest_window_minutes=settings.digest_window_minutes,
        )

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.business_timezone)


@dataclass(frozen=True)
class LowStockItem:
    """Read-only view of an active inventory item."""

    id: str
    name: str
    category: str | None
    quantity: int
    minimum_quantity: int
    location_name: str | None = None

    @property
    def is_low(self) -> bool:
        return self.quantity <= self.minimum_quantity


@dataclass(frozen=True)
class StateSnapshot:
    """A state row as it was when the run started."""

    item_id: str
    is_low: bool
    first_low_at: datetime | None
    last_threshold_email_at: datetime | None
    last_daily_digest_local_date: date | None
    threshold_send_failed: bool = False

    @property
    def threshold_pending(self) -> bool:
        """Still low after the threshold send for this low episode failed."""
        return self.is_low and self.threshold_send_failed


@dataclass
class EvaluationSummary:
    """Outcome of one run, serialised as the trigger endpoint's JSON body."""

    recipients_count: int = 0
    low_count: int = 0
    newly_low_count: int = 0
    sent_threshold: bool = False
    sent_daily: bool = False
    error: str | None = None
    skipped: bool = False
    local_date: date | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> dict:
        data = {
            "recipientsCount": self.recipients_count,
            "lowCount": self.low_count,
            "newlyLowCount": self.newly_low_count,
            "sentThreshold": self.sent_threshold,
            "sentDaily": self.sent_daily,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


def find_newly_low(
    low_items: Iterable[LowStockItem], states: dict[str, StateSnapshot]
) -> list[LowStockItem]:
    """Items that are low now but were not low (or untracked) at run start."""
    newly_low = []
    for item in low_items:
        previous = states.get(item.id)
        if previous is None or not previous.is_low:
            newly_low.append(item)
    return newly_low


def select_threshold_items(
    low_items: Iterable[LowStockItem], states: dict[str, StateSnapshot]
) -> list[LowStockItem]:
    """Newly-low items plus low items whose last threshold send failed."""
    selected = []
    for item in low_items:
        previous = states.get(item.id)
        if previous is None or not previous.is_low or previous.threshold_pending:
            selected.append(item)
    return selected


def in_digest_window(local_now: datetime, digest_hour: int, window_minutes: int) -> bool:
    """Check if a local time falls inside [hour:00, hour:window_minutes]."""
    return local_now.hour == digest_hour and 0 <= local_now.minute <= window_minutes


class LowStockEvaluator:
    """Runs one low-stock evaluation against the database."""

    def __init__(self, db: Session, sender: EmailSender, config: LowStockAlertConfig) -> None:
        self.db = db
        self.sender = sender
        self.config = config

    def run(self, now: datetime | None = None) -> EvaluationSummary:
        """Evaluate all active items once.

        Storage and email failures abort the run; writes committed before the
        failure stay in place and the summary carries the error.
        """
        now = now or datetime.now(UTC)
        summary = EvaluationSummary()
        try:
            self._evaluate(now, summary)
        except (SQLAlchemyError, EmailSendError) as e:
            self.db.rollback()
            logger.error(f"Low-stock evaluation aborted: {e}", exc_info=True)
            summary.error = str(e)
        return summary

    def _evaluate(self, now: datetime, summary: EvaluationSummary) -> None:
        recipients = self.get_recipient_emails()
        summary.recipients_count = len(recipients)

        low_items = [item for item in self.get_active_items() if item.is_low]
        summary.low_count = len(low_items)

        # Snapshot before any write so newly-low detection sees run-start state
        states = self.get_state_snapshot()

        newly_low = find_newly_low(low_items, states)
        summary.newly_low_count = len(newly_low)

        self._persist_low_state(low_items, states, now)
        self._persist_recovery({item.id for item in low_items}, states, now)

        threshold_items = select_threshold_items(low_items, states)
        if recipients and threshold_items:
            subject, body = build_threshold_email(threshold_items, self.config.organization_name)
            try:
                self.sender.send(recipients, subject, body)
            except EmailSendError:
                self._upsert_states(
                    {item.id: {"threshold_send_failed": True} for item in threshold_items}, now
                )
                raise
            summary.sent_threshold = True
            logger.info(f"Threshold alert sent for {len(threshold_items)} item(s)")
            self._upsert_states(
                {
                    item.id: {"last_threshold_email_at": now, "threshold_send_failed": False}
                    for item in threshold_items
                },
                now,
            )

        local_now = now.astimezone(self.config.tz)
        summary.local_date = local_now.date()
        if not (recipients and low_items):
            return
        if not in_digest_window(
            local_now, self.config.digest_hour, self.config.digest_window_minutes
        ):
            return

        today = local_now.date()
        due = [
            item
            for item in low_items
            if item.id not in states or states[item.id].last_daily_digest_local_date != today
        ]
        if not due:
            return

        subject, body = build_daily_digest_email(low_items, self.config.organization_name)
        self.sender.send(recipients, subject, body)
        summary.sent_daily = True
        logger.info(f"Daily digest sent for {len(low_items)} item(s) on {today}")
        self._upsert_states(
            {item.id: {"last_daily_digest_local_date": today} for item in low_items}, now
        )

    def get_recipient_emails(self) -> list[str]:
        """Enabled recipients' trimmed, de-duplicated email addresses."""
        rows = (
            self.db.query(Profile.email)
            .join(InventoryAlertRecipient, InventoryAlertRecipient.profile_id == Profile.id)
            .filter(InventoryAlertRecipient.is_enabled.is_(True))
            .order_by(InventoryAlertRecipient.created_at, InventoryAlertRecipient.profile_id)
            .all()
        )
        emails = [email.strip() for (email,) in rows if email and email.strip()]
        return list(dict.fromkeys(emails))

    def get_active_items(self) -> list[LowStockItem]:
        items = (
            self.db.query(InventoryItem)
            .options(joinedload(InventoryItem.location))
            .filter(InventoryItem.is_active.is_(True))
            .order_by(InventoryItem.name)
            .all()
        )
        return [
            LowStockItem(
                id=item.id,
                name=item.name,
                category=item.category,
                quantity=item.quantity,
                minimum_quantity=item.minimum_quantity,
                location_name=item.location.name if item.location else None,
            )
            for item in items
        ]

    def get_state_snapshot(self) -> dict[str, StateSnapshot]:
        return {
            row.item_id: StateSnapshot(
                item_id=row.item_id,
                is_low=row.is_low,
                first_low_at=row.first_low_at,
                last_threshold_email_at=row.last_threshold_email_at,
                last_daily_digest_local_date=row.last_daily_digest_local_date,
                threshold_send_failed=row.threshold_send_failed,
            )
            for row in self.db.query(LowStockState).all()
        }

    def _persist_low_state(
        self,
        low_items: Sequence[LowStockItem],
        states: dict[str, StateSnapshot],
        now: datetime,
    ) -> None:
        changes = {}
        for item in low_items:
            previous = states.get(item.id)
            if previous and previous.is_low and previous.first_low_at is not None:
                continue
            changes[item.id] = {"is_low": True, "first_low_at": now}
        self._upsert_states(changes, now)

    def _persist_recovery(
        self, low_ids: set[str], states: dict[str, StateSnapshot], now: datetime
    ) -> None:
        changes = {
            item_id: {"is_low": False, "first_low_at": None, "threshold_send_failed": False}
            for item_id, previous in states.items()
            if previous.is_low and item_id not in low_ids
        }
        if changes:
            logger.info(f"{len(changes)} item(s) recovered from low stock")
        self._upsert_states(changes, now)

    def _upsert_states(self, changes: dict[str, dict], now: datetime) -> None:
        """Insert or update state rows by item id and commit."""
        if not changes:
            return

        existing = {
            row.item_id: row
            for row in self.db.query(LowStockState)
            .filter(LowStockState.item_id.in_(list(changes)))
            .all()
        }
        for item_id, values in changes.items():
            row = existing.get(item_id)
            if row is None:
                row = LowStockState(item_id=item_id)
                self.db.add(row)
            for field, value in values.items():
                setattr(row, field, value)
            row.updated_at = now
        self.db.commit()


def run_low_stock_check(
    db: Session,
    source: RunSource = RunSource.CRON,
    initiated_by: int | None = None,
    settings: Settings | None = None,
    sender: EmailSender | None = None,
    lock_factory: Callable[[], AbstractContextManager[None]] = low_stock_run_lock,
    now: datetime | None = None,
) -> EvaluationSummary:
    """Validate config, take the run lock, evaluate and record the run."""
    settings = settings or get_settings()
    now = now or datetime.now(UTC)

    try:
        config = LowStockAlertConfig.from_settings(settings)
    except LowStockConfigError as e:
        logger.error(str(e))
        return EvaluationSummary(error=str(e))

    sender = sender or ResendEmailSender(
        api_key=config.resend_api_key,
        from_email=config.alert_from_email,
        api_url=settings.resend_api_url,
    )

    logger.info(f"Starting low-stock evaluation ({source.value})")
    try:
        with lock_factory():
            summary = LowStockEvaluator(db, sender, config).run(now)
    except RunInProgressError as e:
        logger.warning(f"Skipping low-stock evaluation: {e}")
        summary = EvaluationSummary(
            error="Low-stock evaluation already in progress", skipped=True
        )
    except RedisError as e:
        logger.error(f"Low-stock run lock unavailable: {e}", exc_info=True)
        summary = EvaluationSummary(error=f"Run lock unavailable: {e}")

    logger.info(f"Low-stock evaluation finished: {summary.as_dict()}")
    _record_run(db, source, initiated_by, summary, now)
    return summary


def _record_run(
    db: Session,
    source: RunSource,
    initiated_by: int | None,
    summary: EvaluationSummary,
    now: datetime,
) -> None:
    log = LowStockRunLog(
        run_source=source,
        initiated_by=initiated_by,
        ran_at=now,
        success=summary.ok,
        skipped=summary.skipped,
        local_date=summary.local_date,
        recipients_count=summary.recipients_count,
        low_count=summary.low_count,
        newly_low_count=summary.newly_low_count,
        sent_threshold=summary.sent_threshold,
        sent_daily=summary.sent_daily,
        error_message=summary.error,
    )
    try:
        db.add(log)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to record low-stock run: {e}", exc_info=True)


def get_low_stock_report(db: Session) -> list[tuple[InventoryItem, LowStockState | None]]:
    """Active items currently at or below minimum, with their alert state."""
    return (
        db.query(InventoryItem, LowStockState)
        .outerjoin(LowStockState, LowStockState.item_id == InventoryItem.id)
        .options(joinedload(InventoryItem.location))
        .filter(
            InventoryItem.is_active.is_(True),
            InventoryItem.quantity <= InventoryItem.minimum_quantity,
        )
        .order_by(InventoryItem.name)
        .all()
    )
