"""Profile model: application user, keyed by the auth backend's user id."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text, Uuid

from ideaflow.db.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)  # same id as the auth user

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    role = Column(String(50), nullable=False, default="member")  # member, moderator, admin
    investor_type = Column(String(50), nullable=True)  # active, passive, strategic
    profile = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
