"""InvestorInterest model: a user's declared interest in investing in an idea."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, UniqueConstraint, Uuid

from ideaflow.db.base import Base


class InvestorInterest(Base):
    __tablename__ = "investor_interest"
    __table_args__ = (UniqueConstraint("idea_id", "user_id", name="uq_investor_interest_idea_user"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    idea_id = Column(Uuid, ForeignKey("ideas.id"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False)

    interest_type = Column(String(50), nullable=False)  # active, passive, strategic
    amount_commitment = Column(Numeric(14, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
