from typing import Optional

from pydantic import BaseModel, Field, AliasChoices

from iskolar.models.user import Role


class StudentProfile(BaseModel):
    student_id: str
    full_name: str = ""
    gender: str = ""
    date_of_birth: str = ""
    contact_number: str = ""
    has_completed_profile: bool = False

    class Config:
        from_attributes = True


class SponsorProfile(BaseModel):
    sponsor_id: str
    organization_name: str = ""
    organization_type: str = ""
    official_email: str = ""
    contact_number: str = ""
    has_completed_profile: bool = False

    class Config:
        from_attributes = True


class ProfileUser(BaseModel):
    id: str = Field(validation_alias=AliasChoices("user_id", "id"))
    email: str
    role: Optional[Role] = None
    has_selected_role: bool = False
    profile_url: Optional[str] = None

    class Config:
        from_attributes = True


class ProfileResponse(BaseModel):
    success: bool = True
    user: ProfileUser
    student: Optional[StudentProfile] = None
    sponsor: Optional[SponsorProfile] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None
    organization_name: Optional[str] = None
    organization_type: Optional[str] = None
    official_email: Optional[str] = None
    contact_number: Optional[str] = None


class PictureResponse(BaseModel):
    success: bool = True
    message: str
    profile_url: Optional[str] = None
