"""Idea model: the unit that moves through the workflow."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid

from ideaflow.db.base import Base


class Idea(Base):
    __tablename__ = "ideas"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    submitted_by = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    group_id = Column(Uuid, ForeignKey("groups.id"), nullable=True, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    sector = Column(String(50), nullable=True)  # healthcare, real_estate, other
    status = Column(String(50), nullable=False, default="proposed")  # see domain.stages.IdeaStatus

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
