import logging

from fastapi import APIRouter, Depends, UploadFile, File
from sqlalchemy.orm import Session

from iskolar.core.database import get_db
from iskolar.core.errors import NotFoundError, ValidationError
from iskolar.core.security import get_current_user
from iskolar.models.user import Role, User
from iskolar.schemas.profile import (
    ProfileResponse, ProfileUser, ProfileUpdate, PictureResponse,
    StudentProfile, SponsorProfile,
)
from iskolar.services.storage import BlobStore, blob_name, get_blob_store, replace_blob, validate_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])

STUDENT_UPDATABLE = ("full_name", "gender", "date_of_birth", "contact_number")
SPONSOR_UPDATABLE = ("organization_name", "organization_type", "official_email", "contact_number")


def _profile_response(user: User) -> ProfileResponse:
    return ProfileResponse(
        user=ProfileUser.model_validate(user),
        student=StudentProfile.model_validate(user.student) if user.student else None,
        sponsor=SponsorProfile.model_validate(user.sponsor) if user.sponsor else None,
    )


@router.get("/profile", response_model=ProfileResponse)
def get_profile(user: User = Depends(get_current_user)):
    return _profile_response(user)


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if user.role == Role.STUDENT:
        profile, fields = user.student, STUDENT_UPDATABLE
    elif user.role == Role.SPONSOR:
        profile, fields = user.sponsor, SPONSOR_UPDATABLE
    else:
        raise ValidationError("Please select a role first")

    if profile is None:
        raise NotFoundError("Profile not found. Please complete your profile setup first.")

    changes = payload.model_dump(exclude_unset=True)
    for field in fields:
        if field in changes and changes[field] is not None:
            setattr(profile, field, changes[field].strip())
    db.commit()
    db.refresh(user)
    return _profile_response(user)


@router.post("/profile/picture", response_model=PictureResponse)
async def upload_profile_picture(
    profilePicture: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store),
):
    content = await profilePicture.read()
    validate_image(profilePicture.content_type, len(content))

    name = blob_name("profiles", f"profile-{user.user_id}", profilePicture.filename)
    user.profile_url = replace_blob(store, user.profile_url, name, content, profilePicture.content_type)
    db.commit()
    logger.info("Profile picture updated for user %s", user.user_id)

    return PictureResponse(message="Profile picture uploaded successfully", profile_url=user.profile_url)


@router.delete("/profile/picture", response_model=PictureResponse)
def delete_profile_picture(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store),
):
    if not user.profile_url:
        raise NotFoundError("No profile picture to delete")

    name = store.name_from_url(user.profile_url)
    if name:
        store.delete(name)
    user.profile_url = None
    db.commit()
    logger.info("Profile picture removed for user %s", user.user_id)

    return PictureResponse(message="Profile picture deleted successfully")
