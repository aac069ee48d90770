import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Float, Text, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship

from iskolar.core.database import Base


def _now():
    return datetime.now(timezone.utc)


class Scholarship(Base):
    __tablename__ = "scholarships"

    scholarship_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    sponsor_id = Column(String(36), ForeignKey("sponsors.sponsor_id"), nullable=False, index=True)
    status = Column(String(20), default="active")  # active, closed, draft
    type = Column(String(100), nullable=True)
    purpose = Column(String(255), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    total_amount = Column(Float, nullable=False)
    total_slot = Column(Integer, nullable=False)
    application_deadline = Column(DateTime, nullable=True)
    criteria = Column(JSON, default=list)             # list[str]
    required_documents = Column(JSON, default=list)   # list[str]
    image_url = Column(String(1000), nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    sponsor = relationship("Sponsor", back_populates="scholarships")
