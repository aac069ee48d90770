import string
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Callable, Optional

import bcrypt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from iskolar.core.config import settings
from iskolar.core.database import get_db
from iskolar.core.errors import (
    AccountNotFound, ConfigurationError, InvalidToken, MissingToken, ValidationError,
)

bearer_scheme = HTTPBearer(auto_error=False)

PASSWORD_MIN_LENGTH = 8
# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72
PASSWORD_SYMBOLS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?~`"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ─── Passwords ───

def validate_password(password: str) -> None:
    """Raise ValidationError naming the first complexity rule the password breaks."""
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValidationError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes long")
    if not any(c in string.ascii_uppercase for c in password):
        raise ValidationError("Password must contain at least one uppercase letter")
    if not any(c in string.ascii_lowercase for c in password):
        raise ValidationError("Password must contain at least one lowercase letter")
    if not any(c in string.digits for c in password):
        raise ValidationError("Password must contain at least one number")
    if not any(c in PASSWORD_SYMBOLS for c in password):
        raise ValidationError("Password must contain at least one special character")


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


# ─── Session tokens ───

@dataclass(frozen=True)
class TokenIdentity:
    id: str
    email: str


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at_ms: int


class TokenIssuer:
    """Signs and checks stateless bearer tokens.

    Tokens are never stored server-side: validity comes from the signature and
    the embedded ``exp`` claim alone, so logout is a client-side token delete.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        short_ttl: timedelta = timedelta(days=1),
        long_ttl: timedelta = timedelta(days=30),
        clock: Callable[[], datetime] = utcnow,
    ):
        if not secret:
            raise ConfigurationError("JWT_SECRET environment variable is required")
        self._secret = secret
        self._algorithm = algorithm
        self._short_ttl = short_ttl
        self._long_ttl = long_ttl
        self._clock = clock

    def issue(self, account_id: str, email: str, remember_me: bool) -> IssuedToken:
        now = self._clock()
        expires_at = now + (self._long_ttl if remember_me else self._short_ttl)
        claims = {
            "id": str(account_id),
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, self._secret, algorithm=self._algorithm)
        return IssuedToken(token=token, expires_at_ms=claims["exp"] * 1000)

    def verify(self, token: str) -> TokenIdentity:
        try:
            # Expiry is checked below against the issuer's own clock
            payload = jwt.decode(
                token, self._secret, algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            raise InvalidToken()

        exp = payload.get("exp")
        account_id = payload.get("id")
        email = payload.get("email")
        if not isinstance(exp, (int, float)) or not account_id or not email:
            raise InvalidToken()
        if exp <= self._clock().timestamp():
            raise InvalidToken()
        return TokenIdentity(id=str(account_id), email=str(email))


@lru_cache
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        short_ttl=timedelta(days=settings.TOKEN_TTL_DAYS_SHORT),
        long_ttl=timedelta(days=settings.TOKEN_TTL_DAYS_REMEMBER),
    )


# ─── Session guard ───

def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> TokenIdentity:
    if credentials is None or not credentials.credentials:
        raise MissingToken()
    identity = issuer.verify(credentials.credentials)
    request.state.identity = identity
    return identity


def get_current_user(
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    from iskolar.models.user import User

    user = db.query(User).filter(User.user_id == identity.id).first()
    if user is None:
        raise AccountNotFound()
    return user

