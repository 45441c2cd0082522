"""Workflow reference API routes."""

from fastapi import APIRouter, Depends

from ideaflow.api.deps import get_transition_policy
from ideaflow.domain.stages import CANONICAL_ORDER, STAGE_CATALOG, TransitionPolicy
from ideaflow.schemas.workflow import StageOption, StagesResponse

router = APIRouter()


@router.get("/stages", response_model=StagesResponse)
async def list_stages(policy: TransitionPolicy = Depends(get_transition_policy)) -> StagesResponse:
    """Workflow statuses in canonical order with labels and descriptions."""
    return StagesResponse(
        stages=[
            StageOption(
                value=status,
                label=STAGE_CATALOG[status].label,
                description=STAGE_CATALOG[status].description,
            )
            for status in CANONICAL_ORDER
        ],
        transition_policy=policy.value,
    )
