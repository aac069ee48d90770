import logging

from fastapi import APIRouter, Depends, UploadFile, File, status
from sqlalchemy.orm import Session, joinedload

from iskolar.core.database import get_db
from iskolar.core.errors import NotFoundError, PermissionDenied, ValidationError
from iskolar.core.security import get_current_user
from iskolar.models.profile import Sponsor
from iskolar.models.scholarship import Scholarship
from iskolar.models.user import Role, User
from iskolar.schemas.scholarship import (
    ScholarshipCreate, ScholarshipUpdate, ScholarshipResponse,
    ScholarshipEnvelope, ScholarshipList, ImageResponse,
)
from iskolar.services.storage import BlobStore, blob_name, get_blob_store, replace_blob, validate_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scholarship", tags=["scholarship"])

SCHOLARSHIP_STATUSES = {"active", "closed", "draft"}
REQUIRED_CREATE_FIELDS = ("title", "total_amount", "total_slot", "criteria", "required_documents")


def _sponsor_for(user: User, action: str) -> Sponsor:
    if user.role != Role.SPONSOR:
        raise PermissionDenied(f"Only sponsors can {action}.")
    if user.sponsor is None:
        raise NotFoundError("Sponsor profile not found.")
    return user.sponsor


def _get_scholarship(db: Session, scholarship_id: str) -> Scholarship:
    scholarship = (
        db.query(Scholarship)
        .options(joinedload(Scholarship.sponsor))
        .filter(Scholarship.scholarship_id == scholarship_id)
        .first()
    )
    if not scholarship:
        raise NotFoundError("Scholarship not found.")
    return scholarship


def _owned_scholarship(db: Session, sponsor: Sponsor, scholarship_id: str, action: str) -> Scholarship:
    scholarship = _get_scholarship(db, scholarship_id)
    if scholarship.sponsor_id != sponsor.sponsor_id:
        raise PermissionDenied(f"You don't have permission to {action} this scholarship.")
    return scholarship


def _check_amounts(total_amount, total_slot) -> None:
    if total_amount is not None and total_amount <= 0:
        raise ValidationError("total_amount must be greater than 0")
    if total_slot is not None and total_slot <= 0:
        raise ValidationError("total_slot must be greater than 0")


# ─── List all scholarships (public) ───
@router.get("/", response_model=ScholarshipList)
def list_scholarships(db: Session = Depends(get_db)):
    scholarships = (
        db.query(Scholarship)
        .options(joinedload(Scholarship.sponsor))
        .order_by(Scholarship.created_at.desc())
        .all()
    )
    return ScholarshipList(scholarships=[ScholarshipResponse.model_validate(s) for s in scholarships])


# ─── List the current sponsor's scholarships ───
@router.get("/my-scholarships", response_model=ScholarshipList)
def list_my_scholarships(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    sponsor = _sponsor_for(user, "view their scholarships")
    scholarships = (
        db.query(Scholarship)
        .options(joinedload(Scholarship.sponsor))
        .filter(Scholarship.sponsor_id == sponsor.sponsor_id)
        .order_by(Scholarship.created_at.desc())
        .all()
    )
    return ScholarshipList(scholarships=[ScholarshipResponse.model_validate(s) for s in scholarships])


# ─── Create ───
@router.post("/create", response_model=ScholarshipEnvelope, status_code=status.HTTP_201_CREATED)
def create_scholarship(
    payload: ScholarshipCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    sponsor = _sponsor_for(user, "create scholarships")

    missing = [f for f in REQUIRED_CREATE_FIELDS if getattr(payload, f) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    _check_amounts(payload.total_amount, payload.total_slot)

    scholarship = Scholarship(
        sponsor_id=sponsor.sponsor_id,
        status="active",
        type=payload.type,
        purpose=payload.purpose,
        title=payload.title.strip(),
        description=payload.description,
        total_amount=payload.total_amount,
        total_slot=payload.total_slot,
        application_deadline=payload.application_deadline,
        criteria=payload.criteria,
        required_documents=payload.required_documents,
    )
    db.add(scholarship)
    db.commit()
    db.refresh(scholarship)
    logger.info("Sponsor %s created scholarship %s", sponsor.sponsor_id, scholarship.scholarship_id)

    return ScholarshipEnvelope(
        message="Scholarship created successfully",
        scholarship=ScholarshipResponse.model_validate(scholarship),
    )


# ─── Get one (public) ───
@router.get("/{scholarship_id}", response_model=ScholarshipEnvelope)
def get_scholarship(scholarship_id: str, db: Session = Depends(get_db)):
    scholarship = _get_scholarship(db, scholarship_id)
    return ScholarshipEnvelope(scholarship=ScholarshipResponse.model_validate(scholarship))


# ─── Update (owning sponsor) ───
@router.put("/{scholarship_id}", response_model=ScholarshipEnvelope)
def update_scholarship(
    scholarship_id: str,
    payload: ScholarshipUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    sponsor = _sponsor_for(user, "edit scholarships")
    scholarship = _owned_scholarship(db, sponsor, scholarship_id, "edit")

    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    if "status" in changes and changes["status"] not in SCHOLARSHIP_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(sorted(SCHOLARSHIP_STATUSES))}")
    if "title" in changes and not changes["title"].strip():
        raise ValidationError("title cannot be empty")
    _check_amounts(changes.get("total_amount"), changes.get("total_slot"))

    for field, value in changes.items():
        setattr(scholarship, field, value)
    db.commit()
    db.refresh(scholarship)
    logger.info("Sponsor %s updated scholarship %s", sponsor.sponsor_id, scholarship_id)

    return ScholarshipEnvelope(
        message="Scholarship updated successfully",
        scholarship=ScholarshipResponse.model_validate(scholarship),
    )


# ─── Upload image (owning sponsor) ───
@router.post("/{scholarship_id}/image", response_model=ImageResponse)
async def upload_scholarship_image(
    scholarship_id: str,
    image: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store),
):
    sponsor = _sponsor_for(user, "upload scholarship images")
    scholarship = _owned_scholarship(db, sponsor, scholarship_id, "upload images for")

    content = await image.read()
    validate_image(image.content_type, len(content))

    name = blob_name("scholarships", f"scholarship-{scholarship_id}", image.filename)
    scholarship.image_url = replace_blob(store, scholarship.image_url, name, content, image.content_type)
    db.commit()
    logger.info("Image uploaded for scholarship %s", scholarship_id)

    return ImageResponse(message="Scholarship image uploaded successfully", image_url=scholarship.image_url)
