"""Celery tasks for password-reset email.

Requests only enqueue these; SMTP delivery happens in the worker, so a
forgot-password reply takes the same time whether or not the account exists.
"""

import logging
from functools import lru_cache

from kombu.exceptions import OperationalError

from src.celery_app import app as celery_app
from src.config import get_settings
from src.services.email import EmailService

logger = logging.getLogger(__name__)


@lru_cache
def get_email_service() -> EmailService:
    return EmailService()


@celery_app.task
def send_password_reset_code(to_email: str, code: str, name: str | None = None) -> bool:
    """Deliver a reset code. Returns True if the SMTP server accepted it."""
    return get_email_service().send_password_reset_code(to_email, code, name)


@celery_app.task
def send_password_reset_success(to_email: str, name: str | None = None) -> bool:
    """Tell the user their password was changed."""
    return get_email_service().send_password_reset_success(to_email, name)


def queue_password_reset_code(to_email: str, code: str, name: str | None = None) -> bool:
    """Hand the reset code to the worker. Returns False if the broker is unreachable."""
    try:
        send_password_reset_code.delay(to_email, code, name)
    except OperationalError as e:
        logger.error(f"Could not queue password reset code for {to_email}: {e}")
        if get_settings().is_development:
            # No broker locally: surface the code so the flow can be completed
            logger.warning(f"Password reset code for {to_email}: {code}")
        return False
    return True


def queue_password_reset_success(to_email: str, name: str | None = None) -> bool:
    try:
        send_password_reset_success.delay(to_email, name)
    except OperationalError as e:
        logger.error(f"Could not queue password reset confirmation for {to_email}: {e}")
        return False
    return True
