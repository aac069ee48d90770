from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from iskolar.models.user import Role


# ─── Register / Login ───

class UserCreate(BaseModel):
    email: str
    password: str
    confirm_password: str = Field(alias="confirmPassword")

    class Config:
        populate_by_name = True


class UserLogin(BaseModel):
    email: str
    password: str
    remember_me: bool = Field(default=False, alias="rememberMe")

    class Config:
        populate_by_name = True


class UserSummary(BaseModel):
    # Never carries the password hash
    id: str = Field(validation_alias=AliasChoices("user_id", "id"))
    email: str
    role: Optional[Role] = None
    has_selected_role: bool = False

    class Config:
        from_attributes = True


class RegisterResponse(BaseModel):
    message: str
    user: UserSummary


class LoginResponse(BaseModel):
    message: str
    token: str
    expires_at: int = Field(alias="expiresAt")  # epoch milliseconds
    user: UserSummary

    class Config:
        populate_by_name = True


# ─── Password reset (OTP) ───

class SendOtpRequest(BaseModel):
    email: str


class VerifyOtpRequest(BaseModel):
    email: str
    otp: str


class ResetPasswordRequest(BaseModel):
    email: str
    password: str
    confirm_password: str = Field(alias="confirmPassword")

    class Config:
        populate_by_name = True


class StatusResponse(BaseModel):
    success: bool = True
    message: str
