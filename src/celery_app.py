"""Celery application configuration."""

from celery import Celery

from src.config import get_settings

settings = get_settings()

app = Celery(
    "fleet_inventory",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["src.tasks.low_stock"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    # Run lock expiry is validated to outlast the hard limit
    task_time_limit=settings.low_stock_task_time_limit_seconds,
    task_soft_time_limit=settings.low_stock_task_time_limit_seconds - 60,
    beat_schedule={
        "evaluate-low-stock": {
            "task": "src.tasks.low_stock.evaluate_low_stock",
            "schedule": float(settings.low_stock_check_interval_seconds),
        },
    },
)
