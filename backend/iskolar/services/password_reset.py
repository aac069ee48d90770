"""
Forgot-password flow: send-otp, verify-otp, reset-password.

The three steps are separate stateless HTTP calls correlated only by email;
the OTP ledger holds the state in between. Nothing is retried here, a failed
step is simply repeated by the client.
"""

import logging
from datetime import timedelta
from functools import lru_cache

from iskolar.core.config import settings
from iskolar.core.errors import AccountNotFound, ValidationError
from iskolar.core.security import hash_password, validate_password
from iskolar.services.accounts import AccountStore, normalize_email
from iskolar.services.email import EmailNotifier, send_otp_email
from iskolar.services.otp import InMemoryOtpStore, OtpLedger

logger = logging.getLogger(__name__)


class PasswordResetFlow:
    def __init__(self, accounts: AccountStore, ledger: OtpLedger, notifier: EmailNotifier):
        self.accounts = accounts
        self.ledger = ledger
        self.notifier = notifier

    def request(self, email: str) -> None:
        email = normalize_email(email)
        if not email:
            raise ValidationError("Email is required")
        if self.accounts.find_by_email(email) is None:
            raise AccountNotFound("Email not found")

        # No per-email throttling: every call issues a new code and one email
        code = self.ledger.request_otp(email)
        ttl_minutes = int(self.ledger.ttl.total_seconds() // 60)
        send_otp_email(self.notifier, email, code, ttl_minutes)

    def verify(self, email: str, code: str) -> None:
        email = normalize_email(email)
        if not email or not code:
            raise ValidationError("Email and OTP are required")
        self.ledger.check_otp(email, code)

    def reset(self, email: str, password: str, confirm_password: str) -> None:
        email = normalize_email(email)
        if not email or not password or not confirm_password:
            raise ValidationError("All fields are required")

        # Unverified callers get OtpNotVerified whatever the password looks like
        self.ledger.require_verified(email)

        if password != confirm_password:
            raise ValidationError("Passwords do not match")
        validate_password(password)

        user = self.accounts.find_by_email(email)
        if user is None:
            raise AccountNotFound()

        user.password_hash = hash_password(password)
        self.accounts.save(user)
        self.ledger.consume(email)
        logger.info("Password reset completed for %s", email)


@lru_cache
def get_otp_ledger() -> OtpLedger:
    """Process-wide ledger shared by every request."""
    return OtpLedger(InMemoryOtpStore(), ttl=timedelta(minutes=settings.OTP_TTL_MINUTES))
