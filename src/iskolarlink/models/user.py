"""Directory user model (scholars and admins)."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utc_now

ROLE_SCHOLAR = "scholar"
ROLE_ADMIN = "admin"


class User(Base):
    """Portal account; the tracker reads it but never writes it."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="users_email_unique"),
    )

    user_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name = Column(String, nullable=False)
    batch_year = Column(String, nullable=False, default="")
    email = Column(String, nullable=False)
    role = Column(String, nullable=False, default=ROLE_SCHOLAR)
    verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    tracker_records = relationship("TrackerRecord", back_populates="scholar")

    @property
    def is_verified_scholar(self) -> bool:
        return self.role == ROLE_SCHOLAR and bool(self.verified)
