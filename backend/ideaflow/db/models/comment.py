"""Comment model."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Text, Uuid

from ideaflow.db.base import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    idea_id = Column(Uuid, ForeignKey("ideas.id"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False)

    content = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
