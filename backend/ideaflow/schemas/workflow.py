"""Workflow Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from ideaflow.domain.stages import IdeaStatus


class StageOption(BaseModel):
    """A workflow status with its display label."""

    value: IdeaStatus
    label: str
    description: str


class StagesResponse(BaseModel):
    stages: list[StageOption]
    transition_policy: Literal["admin_override", "forward_only"]


class ProgressionResponse(BaseModel):
    """Criteria report for moving an idea between two statuses.

    An empty report with can_progress=True means no criteria are defined for
    the pair, not that the idea was checked.
    """

    idea_id: str
    from_status: IdeaStatus
    to_status: IdeaStatus
    can_progress: bool
    criteria_defined: bool
    met_criteria: list[str] = Field(default_factory=list)
    unmet_criteria: list[str] = Field(default_factory=list)


class StatusChangeRequest(BaseModel):
    new_status: IdeaStatus
    reason: str | None = Field(default=None, max_length=2000)
    expected_status: IdeaStatus | None = None


class TransitionItem(BaseModel):
    id: str
    from_status: str | None
    to_status: str
    reason: str | None
    changed_by: str
    changer_name: str | None = None
    created_at: datetime


class StatusChangeResponse(BaseModel):
    idea_id: str
    status: IdeaStatus
    transition: TransitionItem


class TransitionHistoryResponse(BaseModel):
    """Status history, newest first. items is never null."""

    idea_id: str
    current_status: IdeaStatus
    selectable_targets: list[IdeaStatus] = Field(default_factory=list)
    items: list[TransitionItem] = Field(default_factory=list)
    total: int = 0


class VoteStatsSchema(BaseModel):
    upvotes: int
    downvotes: int
    total: int
    net: int


class ScorecardResponse(BaseModel):
    idea_id: str
    status: IdeaStatus
    votes: VoteStatsSchema
    comment_count: int
    evaluation_count: int
    dimension_averages: dict[str, float] | None = None
    composite_average: float | None = None
    investor_interest_count: int
    document_count: int
