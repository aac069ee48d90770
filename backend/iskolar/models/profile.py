import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from iskolar.core.database import Base


class Student(Base):
    __tablename__ = "students"

    student_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.user_id"), unique=True, nullable=False, index=True)
    full_name = Column(String(255), default="")
    gender = Column(String(20), default="")           # Male, Female
    date_of_birth = Column(String(20), default="")    # MM/DD/YYYY as entered on the device
    contact_number = Column(String(50), default="")
    has_completed_profile = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="student")


class Sponsor(Base):
    __tablename__ = "sponsors"

    sponsor_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.user_id"), unique=True, nullable=False, index=True)
    organization_name = Column(String(255), default="")
    organization_type = Column(String(50), default="")  # Non-profit, Private Company, Foundation, ...
    official_email = Column(String(255), default="")
    contact_number = Column(String(50), default="")
    has_completed_profile = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="sponsor")
    scholarships = relationship("Scholarship", back_populates="sponsor")
