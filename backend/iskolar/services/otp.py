"""
One-time codes for password reset.

Each email has at most one live record, which moves through

    absent -> pending -> verified -> absent

Expiry is checked lazily: an expired record is only dropped when the next
check or consume call for that email touches it. Records live in the process
(InMemoryOtpStore), so a restart silently invalidates outstanding resets.
Running several instances requires an OtpStore backed by a shared TTL store.
"""

import logging
import secrets
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional

from iskolar.core.errors import OtpExpired, OtpMismatch, OtpNotFound, OtpNotVerified
from iskolar.core.security import utcnow

logger = logging.getLogger(__name__)

OTP_MIN = 100000
OTP_MAX = 999999


class OtpState(str, Enum):
    ABSENT = "absent"
    PENDING = "pending"
    VERIFIED = "verified"


@dataclass
class OtpRecord:
    code: str
    expires_at: datetime
    verified: bool = False


class OtpStore(ABC):
    """Keyed storage for OTP records."""

    @abstractmethod
    def get(self, email: str) -> Optional[OtpRecord]:
        ...

    @abstractmethod
    def set(self, email: str, record: OtpRecord) -> None:
        ...

    @abstractmethod
    def delete(self, email: str) -> None:
        ...


class InMemoryOtpStore(OtpStore):
    def __init__(self):
        self._records: dict[str, OtpRecord] = {}

    def get(self, email: str) -> Optional[OtpRecord]:
        return self._records.get(email)

    def set(self, email: str, record: OtpRecord) -> None:
        self._records[email] = record

    def delete(self, email: str) -> None:
        self._records.pop(email, None)

    def __len__(self) -> int:
        return len(self._records)


def generate_code() -> str:
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


class OtpLedger:
    def __init__(
        self,
        store: OtpStore,
        ttl: timedelta = timedelta(minutes=5),
        clock: Callable[[], datetime] = utcnow,
        code_factory: Callable[[], str] = generate_code,
    ):
        self.store = store
        self.ttl = ttl
        self._clock = clock
        self._code_factory = code_factory
        # Sync routes run in the threadpool; read-modify-write must not interleave
        self._lock = threading.RLock()

    def request_otp(self, email: str) -> str:
        """Issue a fresh code, replacing whatever record the email had."""
        code = self._code_factory()
        with self._lock:
            self.store.set(email, OtpRecord(code=code, expires_at=self._clock() + self.ttl))
        logger.info("OTP issued for %s", email)
        return code

    def _live_record(self, email: str) -> OtpRecord:
        record = self.store.get(email)
        if record is None:
            raise OtpNotFound()
        if self._clock() >= record.expires_at:
            self.store.delete(email)
            logger.info("OTP for %s expired", email)
            raise OtpExpired()
        return record

    def check_otp(self, email: str, code: str) -> None:
        with self._lock:
            record = self._live_record(email)
            if not secrets.compare_digest(record.code.encode(), str(code).strip().encode()):
                raise OtpMismatch()
            # Checking an already verified record again is fine until it is consumed
            self.store.set(email, OtpRecord(code=record.code, expires_at=record.expires_at, verified=True))
        logger.info("OTP verified for %s", email)

    def require_verified(self, email: str) -> None:
        """Reset is only allowed from the verified state; anything else is OtpNotVerified."""
        if self.state(email) is not OtpState.VERIFIED:
            raise OtpNotVerified()

    def consume(self, email: str) -> None:
        with self._lock:
            self.store.delete(email)

    def state(self, email: str) -> OtpState:
        with self._lock:
            record = self.store.get(email)
            if record is None:
                return OtpState.ABSENT
            if self._clock() >= record.expires_at:
                self.store.delete(email)
                return OtpState.ABSENT
            return OtpState.VERIFIED if record.verified else OtpState.PENDING
