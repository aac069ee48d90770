from typing import Optional

from pydantic import BaseModel, Field, AliasChoices

from iskolar.models.user import Role


class SelectRoleRequest(BaseModel):
    role: str


class OnboardingUser(BaseModel):
    id: str = Field(validation_alias=AliasChoices("user_id", "id"))
    email: str
    role: Optional[Role] = None
    has_selected_role: bool = False

    class Config:
        from_attributes = True


class SelectRoleResponse(BaseModel):
    success: bool = True
    message: str
    user: OnboardingUser


class ProfileStatusUser(OnboardingUser):
    profile_completed: bool = False


class ProfileStatusResponse(BaseModel):
    success: bool = True
    user: ProfileStatusUser


class ProfileSetupRequest(BaseModel):
    """Either the student or the sponsor half is filled, depending on role."""

    # Student
    full_name: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None
    # Sponsor
    organization_name: Optional[str] = None
    organization_type: Optional[str] = None
    official_email: Optional[str] = None
    # Both
    contact_number: Optional[str] = None
