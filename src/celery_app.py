"""Celery application configuration."""

from celery import Celery

from src.config import get_settings

settings = get_settings()

app = Celery(
    "notes",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["src.tasks.email", "src.tasks.otp_cleanup"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=60,
    task_soft_time_limit=45,
    beat_schedule={
        "sweep-expired-reset-codes": {
            "task": "src.tasks.otp_cleanup.sweep_expired_codes",
            "schedule": float(settings.otp_sweep_interval_seconds or 300),
        },
    },
)
