import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from iskolar.core.database import get_db
from iskolar.core.errors import InvalidCredentials, ValidationError
from iskolar.core.security import (
    TokenIssuer, get_current_user, get_token_issuer,
    hash_password, validate_password, verify_password,
)
from iskolar.models.user import User
from iskolar.schemas.auth import (
    UserCreate, UserLogin, UserSummary, RegisterResponse, LoginResponse,
    SendOtpRequest, VerifyOtpRequest, ResetPasswordRequest, StatusResponse,
)
from iskolar.services.accounts import AccountStore
from iskolar.services.email import EmailNotifier, get_notifier
from iskolar.services.otp import OtpLedger
from iskolar.services.password_reset import PasswordResetFlow, get_otp_ledger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def get_account_store(db: Session = Depends(get_db)) -> AccountStore:
    return AccountStore(db)


def get_reset_flow(
    accounts: AccountStore = Depends(get_account_store),
    ledger: OtpLedger = Depends(get_otp_ledger),
    notifier: EmailNotifier = Depends(get_notifier),
) -> PasswordResetFlow:
    return PasswordResetFlow(accounts, ledger, notifier)


# ─── Register ───
@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(data: UserCreate, accounts: AccountStore = Depends(get_account_store)):
    if not data.email.strip() or not data.password or not data.confirm_password:
        raise ValidationError("All fields are required")
    if data.password != data.confirm_password:
        raise ValidationError("Passwords do not match")
    validate_password(data.password)

    user = accounts.create(data.email, hash_password(data.password))
    logger.info("Registered user %s", user.user_id)
    return RegisterResponse(message="Account created successfully", user=UserSummary.model_validate(user))


# ─── Login ───
@router.post("/login", response_model=LoginResponse)
def login(
    data: UserLogin,
    accounts: AccountStore = Depends(get_account_store),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    if not data.email.strip() or not data.password:
        raise ValidationError("Email and password required")

    user = accounts.find_by_email(data.email)
    if not user or not verify_password(data.password, user.password_hash):
        raise InvalidCredentials()

    issued = issuer.issue(user.user_id, user.email, data.remember_me)
    logger.info("User %s logged in (remember_me=%s)", user.user_id, data.remember_me)
    return LoginResponse(
        message="Login successful",
        token=issued.token,
        expires_at=issued.expires_at_ms,
        user=UserSummary.model_validate(user),
    )


# ─── Get current user ───
@router.get("/me", response_model=UserSummary)
def get_me(user: User = Depends(get_current_user)):
    return user


# ─── Forgot password: Step 1, send OTP (public) ───
@router.post("/send-otp", response_model=StatusResponse)
def send_otp(payload: SendOtpRequest, flow: PasswordResetFlow = Depends(get_reset_flow)):
    flow.request(payload.email)
    return StatusResponse(message="OTP sent to your email")


# ─── Forgot password: Step 2, verify OTP (public) ───
@router.post("/verify-otp", response_model=StatusResponse)
def verify_otp(payload: VerifyOtpRequest, flow: PasswordResetFlow = Depends(get_reset_flow)):
    flow.verify(payload.email, payload.otp)
    return StatusResponse(message="OTP verified successfully")


# ─── Forgot password: Step 3, set new password (public) ───
@router.post("/reset-password", response_model=StatusResponse)
def reset_password(payload: ResetPasswordRequest, flow: PasswordResetFlow = Depends(get_reset_flow)):
    flow.reset(payload.email, payload.password, payload.confirm_password)
    return StatusResponse(message="Password reset successfully")
