"""Celery task for purging expired password-reset codes."""

import logging

from src.celery_app import app as celery_app
from src.config import get_settings
from src.services.otp import OTPService, build_otp_store

logger = logging.getLogger(__name__)


@celery_app.task
def sweep_expired_codes() -> dict:
    """Delete expired codes from the shared store.

    Runs every OTP_SWEEP_INTERVAL_SECONDS (5 minutes by default) via celery-beat. Only meaningful with the Redis
    backend; the in-memory store lives inside each API process and is swept
    there.

    Returns:
        dict with the number of codes removed
    """
    settings = get_settings()
    if settings.otp_backend != "redis":
        logger.info("OTP backend is in-memory, nothing to sweep from the worker")
        return {"removed": 0, "skipped": True}

    removed = OTPService(build_otp_store(settings)).sweep()
    return {"removed": removed, "skipped": False}
