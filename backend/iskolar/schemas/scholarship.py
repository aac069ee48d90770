import json
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


def _coerce_str_list(value):
    """Accept a list or a JSON-encoded list (multipart clients send strings)."""
    if value is None or isinstance(value, list):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            raise ValueError("must be a list or a JSON-encoded list")
        if not isinstance(parsed, list):
            raise ValueError("must be a list or a JSON-encoded list")
        return parsed
    raise ValueError("must be a list or a JSON-encoded list")


class ScholarshipCreate(BaseModel):
    type: Optional[str] = None
    purpose: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    total_amount: Optional[float] = None
    total_slot: Optional[int] = None
    application_deadline: Optional[datetime] = None
    criteria: Optional[list[str]] = None
    required_documents: Optional[list[str]] = None

    @field_validator("criteria", "required_documents", mode="before")
    @classmethod
    def parse_lists(cls, value):
        return _coerce_str_list(value)


class ScholarshipUpdate(BaseModel):
    type: Optional[str] = None
    purpose: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    total_amount: Optional[float] = None
    total_slot: Optional[int] = None
    application_deadline: Optional[datetime] = None
    criteria: Optional[list[str]] = None
    required_documents: Optional[list[str]] = None
    status: Optional[str] = None

    @field_validator("criteria", "required_documents", mode="before")
    @classmethod
    def parse_lists(cls, value):
        return _coerce_str_list(value)


class SponsorSummary(BaseModel):
    sponsor_id: Optional[str] = None
    organization_name: Optional[str] = None

    class Config:
        from_attributes = True


class ScholarshipResponse(BaseModel):
    scholarship_id: str
    sponsor_id: str
    status: str
    type: Optional[str] = None
    purpose: Optional[str] = None
    title: str
    description: Optional[str] = None
    total_amount: float
    total_slot: int
    application_deadline: Optional[datetime] = None
    criteria: list[str] = []
    required_documents: list[str] = []
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    sponsor: Optional[SponsorSummary] = None

    class Config:
        from_attributes = True


class ScholarshipEnvelope(BaseModel):
    success: bool = True
    message: str = ""
    scholarship: ScholarshipResponse


class ScholarshipList(BaseModel):
    success: bool = True
    scholarships: list[ScholarshipResponse]


class ImageResponse(BaseModel):
    success: bool = True
    message: str
    image_url: str
