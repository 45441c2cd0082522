"""Evaluation model: four 1-5 sub-scores per evaluator per idea."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, UniqueConstraint, Uuid

from ideaflow.db.base import Base


class Evaluation(Base):
    __tablename__ = "evaluations"
    __table_args__ = (
        UniqueConstraint("idea_id", "user_id", name="uq_evaluation_idea_user"),
        CheckConstraint("market_size BETWEEN 1 AND 5", name="ck_evaluation_market_size"),
        CheckConstraint("feasibility BETWEEN 1 AND 5", name="ck_evaluation_feasibility"),
        CheckConstraint("strategic_fit BETWEEN 1 AND 5", name="ck_evaluation_strategic_fit"),
        CheckConstraint("novelty BETWEEN 1 AND 5", name="ck_evaluation_novelty"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    idea_id = Column(Uuid, ForeignKey("ideas.id"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False)

    market_size = Column(Integer, nullable=True)
    feasibility = Column(Integer, nullable=True)
    strategic_fit = Column(Integer, nullable=True)
    novelty = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
