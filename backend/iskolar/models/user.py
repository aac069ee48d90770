import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, String, DateTime, Boolean, Enum as SAEnum
from sqlalchemy.orm import relationship

from iskolar.core.database import Base


class Role(str, Enum):
    STUDENT = "student"
    SPONSOR = "sponsor"
    ADMIN = "admin"


def _now():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(128), nullable=False)

    # Onboarding: role stays NULL until the user picks one, then it is final
    role = Column(
        SAEnum(Role, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=True,
    )
    has_selected_role = Column(Boolean, default=False, nullable=False)
    profile_url = Column(String(1000), nullable=True)

    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    student = relationship("Student", back_populates="user", uselist=False)
    sponsor = relationship("Sponsor", back_populates="user", uselist=False)
