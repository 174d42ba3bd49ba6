"""One-time codes for the password-reset flow.

Codes live in an ``OTPStore``. The in-memory store suits a single API process
and tests; deployments running several workers use the Redis store so every
process sees the same codes.
"""

import json
import logging
import secrets
from dataclasses import asdict, dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

import redis

from src.config import Settings, get_settings
from src.errors import CodeAttemptsExhausted, CodeExpired, CodeMismatch, CodeNotFound

logger = logging.getLogger(__name__)

OTP_LENGTH = 6


@dataclass
class OneTimeCode:
    """An active code for one email address."""

    email: str
    code: str
    expires_at: datetime
    attempts: int = 0

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at <= (now or datetime.now(UTC))


class OTPStore(Protocol):
    """Key-value storage for codes, keyed by email."""

    def get(self, email: str) -> OneTimeCode | None: ...

    def set(self, entry: OneTimeCode) -> None: ...

    def delete(self, email: str) -> None: ...

    def sweep(self, now: datetime | None = None) -> int:
        """Remove every expired entry and return how many were removed."""
        ...


class InMemoryOTPStore:
    """Process-local store. Only valid while a single API process serves requests."""

    def __init__(self) -> None:
        self._entries: dict[str, OneTimeCode] = {}

    def get(self, email: str) -> OneTimeCode | None:
        return self._entries.get(email)

    def set(self, entry: OneTimeCode) -> None:
        self._entries[entry.email] = entry

    def delete(self, email: str) -> None:
        self._entries.pop(email, None)

    def sweep(self, now: datetime | None = None) -> int:
        now = now or datetime.now(UTC)
        expired = [email for email, entry in self._entries.items() if entry.is_expired(now)]
        for email in expired:
            del self._entries[email]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


class RedisOTPStore:
    """Shared store. Entries are JSON blobs that Redis also expires on its own."""

    key_prefix = "otp:"

    def __init__(self, client: redis.Redis):
        self.client = client

    def _key(self, email: str) -> str:
        return f"{self.key_prefix}{email}"

    def get(self, email: str) -> OneTimeCode | None:
        raw = self.client.get(self._key(email))
        if raw is None:
            return None
        data = json.loads(raw)
        return OneTimeCode(
            email=data["email"],
            code=data["code"],
            expires_at=datetime.fromisoformat(data["expires_at"]),
            attempts=data["attempts"],
        )

    def set(self, entry: OneTimeCode) -> None:
        data = asdict(entry)
        data["expires_at"] = entry.expires_at.isoformat()
        ttl = max(1, int((entry.expires_at - datetime.now(UTC)).total_seconds()))
        self.client.set(self._key(entry.email), json.dumps(data), ex=ttl)

    def delete(self, email: str) -> None:
        self.client.delete(self._key(email))

    def sweep(self, now: datetime | None = None) -> int:
        # Redis drops keys at their TTL; this catches entries whose TTL was lost
        now = now or datetime.now(UTC)
        removed = 0
        for key in self.client.scan_iter(match=f"{self.key_prefix}*"):
            raw = self.client.get(key)
            if raw is None:
                continue
            expires_at = datetime.fromisoformat(json.loads(raw)["expires_at"])
            if expires_at <= now:
                self.client.delete(key)
                removed += 1
        return removed


def build_otp_store(settings: Settings | None = None) -> OTPStore:
    """Create the store selected by ``OTP_BACKEND``."""
    settings = settings or get_settings()
    if settings.otp_backend == "redis":
        logger.info("Using Redis one-time-code store")
        return RedisOTPStore(redis.from_url(settings.redis_url))
    logger.info("Using in-memory one-time-code store")
    return InMemoryOTPStore()


def generate_code(length: int = OTP_LENGTH) -> str:
    """Random numeric code of exactly ``length`` digits."""
    return "".join(secrets.choice("0123456789") for _ in range(length))


class OTPService:
    """Issues and checks single-use, time-boxed, attempt-limited codes.

    Per email: absent -> active -> consumed | expired | attempts exhausted.
    """

    def __init__(
        self,
        store: OTPStore,
        ttl: timedelta | None = None,
        max_attempts: int | None = None,
    ):
        settings = get_settings()
        self.store = store
        self.ttl = ttl or timedelta(minutes=settings.otp_ttl_minutes)
        self.max_attempts = max_attempts or settings.otp_max_attempts

    def issue(self, email: str) -> str:
        """Create a code for ``email``, replacing any active one."""
        code = generate_code()
        expires_at = datetime.now(UTC) + self.ttl
        self.store.set(OneTimeCode(email=email, code=code, expires_at=expires_at))
        logger.info(f"Issued password reset code for {email}, expires at {expires_at.isoformat()}")
        return code

    def check(self, email: str, candidate: str) -> OneTimeCode:
        """Validate ``candidate`` without consuming the code.

        Mismatches count toward the attempt limit. Expired and exhausted
        entries are deleted.
        """
        entry = self.store.get(email)
        if entry is None:
            logger.warning(f"Code verification failed for {email}: no active code")
            raise CodeNotFound()

        if entry.is_expired():
            self.store.delete(email)
            logger.warning(f"Code verification failed for {email}: expired")
            raise CodeExpired()

        if entry.attempts >= self.max_attempts:
            self.store.delete(email)
            logger.warning(f"Code verification failed for {email}: too many attempts")
            raise CodeAttemptsExhausted()

        if not secrets.compare_digest(entry.code, candidate):
            entry.attempts += 1
            self.store.set(entry)
            remaining = self.max_attempts - entry.attempts
            logger.warning(
                f"Code verification failed for {email}: mismatch, {remaining} attempts remaining"
            )
            raise CodeMismatch(remaining)

        return entry

    def verify(self, email: str, candidate: str) -> None:
        """Validate ``candidate`` and consume the code on success."""
        self.check(email, candidate)
        self.store.delete(email)
        logger.info(f"Password reset code verified for {email}")

    def clear(self, email: str) -> None:
        self.store.delete(email)

    def expires_at(self, email: str) -> datetime | None:
        entry = self.store.get(email)
        return entry.expires_at if entry else None

    def sweep(self) -> int:
        removed = self.store.sweep()
        if removed:
            logger.info(f"Swept {removed} expired password reset codes")
        else:
            logger.debug("No expired password reset codes to sweep")
        return removed
