"""WorkflowTransition model: append-only status history."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid

from ideaflow.db.base import Base


class WorkflowTransition(Base):
    __tablename__ = "workflow_transitions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    idea_id = Column(Uuid, ForeignKey("ideas.id"), nullable=False, index=True)

    from_status = Column(String(50), nullable=True)  # null for the first recorded transition
    to_status = Column(String(50), nullable=False)
    reason = Column(Text, nullable=True)
    changed_by = Column(Uuid, ForeignKey("profiles.id"), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
    # NO updated_at -- transitions are immutable (append-only)
