"""Idea workflow API endpoints.

GET  /api/ideas/{idea_id}/progression  - Criteria report for a status change
POST /api/ideas/{idea_id}/status       - Admin status change (criteria not enforced)
GET  /api/ideas/{idea_id}/transitions  - Status history, newest first
GET  /api/ideas/{idea_id}/scorecard    - Vote, evaluation, interest and document summary

StoreUnavailableError raised while reading is answered with 503 by the app-level handler.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException

from ideaflow.api.deps import get_transition_policy, get_workflow_store
from ideaflow.core.auth import AdminCapability, AuthUser, require_admin, require_auth
from ideaflow.core.exceptions import IdeaNotFoundError
from ideaflow.db.workflow_store import WorkflowStore
from ideaflow.domain.criteria import has_criteria
from ideaflow.domain.stages import IdeaStatus, TransitionPolicy, TransitionRecord
from ideaflow.schemas.workflow import (
    ProgressionResponse,
    ScorecardResponse,
    StatusChangeRequest,
    StatusChangeResponse,
    TransitionHistoryResponse,
    TransitionItem,
    VoteStatsSchema,
)
from ideaflow.services.progression import ProgressionEvaluator
from ideaflow.services.scorecard_service import ScorecardService
from ideaflow.services.workflow import WorkflowService

router = APIRouter()

_FAILURE_STATUS = {
    "not_found": 404,
    "stale": 409,
    "rejected": 409,
    "unavailable": 503,
}


def _transition_item(record: TransitionRecord) -> TransitionItem:
    return TransitionItem(
        id=str(record.id),
        from_status=record.from_status,
        to_status=record.to_status,
        reason=record.reason,
        changed_by=str(record.changed_by),
        changer_name=record.changer_name,
        created_at=record.created_at,
    )


async def _current_status(store: WorkflowStore, idea_id: uuid.UUID) -> IdeaStatus:
    try:
        return await store.get_idea_status(idea_id)
    except IdeaNotFoundError:
        raise HTTPException(status_code=404, detail="Idea not found")


@router.get("/{idea_id}/progression", response_model=ProgressionResponse)
async def get_progression(
    idea_id: uuid.UUID,
    to_status: IdeaStatus | None = None,
    user: AuthUser = Depends(require_auth),
    store: WorkflowStore = Depends(get_workflow_store),
) -> ProgressionResponse:
    """Evaluate the criteria for moving the idea from its current status.

    Query params:
        to_status: Target status (default: the next canonical stage)

    The report is advisory. Admins may change the status regardless.
    """
    current = await _current_status(store, idea_id)
    target = to_status or current.next_stage
    if target is None:
        raise HTTPException(
            status_code=422,
            detail=f"Idea is at the final stage '{current.value}'; pass to_status explicitly",
        )

    report = await ProgressionEvaluator(store).evaluate_progression(idea_id, current, target)

    return ProgressionResponse(
        idea_id=str(idea_id),
        from_status=current,
        to_status=target,
        can_progress=report.can_progress,
        criteria_defined=has_criteria(current, target),
        met_criteria=report.met_criteria,
        unmet_criteria=report.unmet_criteria,
    )


@router.post("/{idea_id}/status", response_model=StatusChangeResponse)
async def change_status(
    idea_id: uuid.UUID,
    request: StatusChangeRequest,
    admin: AdminCapability = Depends(require_admin),
    store: WorkflowStore = Depends(get_workflow_store),
    policy: TransitionPolicy = Depends(get_transition_policy),
) -> StatusChangeResponse:
    """Change an idea's workflow status (admin only).

    Raises:
        HTTPException(404): Idea not found
        HTTPException(409): Status changed concurrently or rejected by policy
        HTTPException(503): Store unavailable; the status did not change
    """
    service = WorkflowService(store, policy)
    result = await service.apply_status_change(
        idea_id,
        request.new_status,
        request.reason,
        admin,
        expected_status=request.expected_status,
    )

    if not result.success:
        raise HTTPException(status_code=_FAILURE_STATUS[result.error_code], detail=result.error)

    return StatusChangeResponse(
        idea_id=str(idea_id),
        status=request.new_status,
        transition=_transition_item(result.transition),
    )


@router.get("/{idea_id}/transitions", response_model=TransitionHistoryResponse)
async def get_transitions(
    idea_id: uuid.UUID,
    user: AuthUser = Depends(require_auth),
    store: WorkflowStore = Depends(get_workflow_store),
    policy: TransitionPolicy = Depends(get_transition_policy),
) -> TransitionHistoryResponse:
    """Status history for an idea, newest first, plus the statuses an admin may pick next."""
    service = WorkflowService(store, policy)
    try:
        current, targets = await service.get_selectable_targets(idea_id)
        records = await service.get_history(idea_id)
    except IdeaNotFoundError:
        raise HTTPException(status_code=404, detail="Idea not found")

    items = [_transition_item(r) for r in records]
    return TransitionHistoryResponse(
        idea_id=str(idea_id),
        current_status=current,
        selectable_targets=targets,
        items=items,
        total=len(items),
    )


@router.get("/{idea_id}/scorecard", response_model=ScorecardResponse)
async def get_scorecard(
    idea_id: uuid.UUID,
    user: AuthUser = Depends(require_auth),
    store: WorkflowStore = Depends(get_workflow_store),
) -> ScorecardResponse:
    """Vote tally, evaluation averages and signal counts for an idea."""
    try:
        card = await ScorecardService(store).get_scorecard(idea_id)
    except IdeaNotFoundError:
        raise HTTPException(status_code=404, detail="Idea not found")

    return ScorecardResponse(
        idea_id=str(idea_id),
        status=card.status,
        votes=VoteStatsSchema(
            upvotes=card.votes.upvotes,
            downvotes=card.votes.downvotes,
            total=card.votes.total,
            net=card.votes.net,
        ),
        comment_count=card.comment_count,
        evaluation_count=card.evaluation_count,
        dimension_averages=card.dimension_averages,
        composite_average=card.composite_average,
        investor_interest_count=card.investor_interest_count,
        document_count=card.document_count,
    )
