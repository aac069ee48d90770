import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from iskolar.core.database import get_db
from iskolar.core.errors import ValidationError
from iskolar.core.security import get_current_user
from iskolar.models.profile import Student, Sponsor
from iskolar.models.user import Role, User
from iskolar.schemas.onboarding import (
    SelectRoleRequest, SelectRoleResponse, OnboardingUser,
    ProfileStatusResponse, ProfileStatusUser, ProfileSetupRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])

SELECTABLE_ROLES = {Role.STUDENT.value, Role.SPONSOR.value}

STUDENT_FIELDS = ("full_name", "gender", "date_of_birth", "contact_number")
SPONSOR_FIELDS = ("organization_name", "organization_type", "official_email", "contact_number")


def profile_completed(user: User) -> bool:
    if user.role == Role.STUDENT:
        return bool(user.student and user.student.has_completed_profile)
    if user.role == Role.SPONSOR:
        return bool(user.sponsor and user.sponsor.has_completed_profile)
    return False


# ─── Select role (once) ───
@router.post("/select-role", response_model=SelectRoleResponse)
def select_role(
    payload: SelectRoleRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if payload.role not in SELECTABLE_ROLES:
        raise ValidationError("Invalid role. Must be 'student' or 'sponsor'")

    if user.role and user.has_selected_role:
        raise ValidationError(f"You have already selected your role as {user.role.value}.")

    user.role = Role(payload.role)
    user.has_selected_role = True
    db.commit()
    db.refresh(user)
    logger.info("User %s selected role %s", user.user_id, user.role.value)

    return SelectRoleResponse(
        message="Role selected successfully",
        user=OnboardingUser.model_validate(user),
    )


# ─── Profile status ───
@router.post("/profile-status", response_model=ProfileStatusResponse)
def get_profile_status(user: User = Depends(get_current_user)):
    return ProfileStatusResponse(
        user=ProfileStatusUser(
            id=user.user_id,
            email=user.email,
            role=user.role,
            has_selected_role=bool(user.has_selected_role),
            profile_completed=profile_completed(user),
        )
    )


# ─── Profile setup (student or sponsor form) ───
@router.post("/profile-setup", response_model=ProfileStatusResponse)
def setup_profile(
    payload: ProfileSetupRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if user.role == Role.STUDENT:
        fields, model, existing = STUDENT_FIELDS, Student, user.student
    elif user.role == Role.SPONSOR:
        fields, model, existing = SPONSOR_FIELDS, Sponsor, user.sponsor
    else:
        raise ValidationError("Please select a role first")

    values = {f: (getattr(payload, f) or "").strip() for f in fields}
    missing = [f for f, v in values.items() if not v]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    profile = existing or model(user_id=user.user_id)
    for field, value in values.items():
        setattr(profile, field, value)
    profile.has_completed_profile = True
    db.add(profile)
    db.commit()
    db.refresh(user)
    logger.info("User %s completed %s profile", user.user_id, user.role.value)

    return ProfileStatusResponse(
        user=ProfileStatusUser(
            id=user.user_id,
            email=user.email,
            role=user.role,
            has_selected_role=bool(user.has_selected_role),
            profile_completed=True,
        )
    )
