"""Idea status enum, stage catalog and transition policy.

Pure domain logic with no external dependencies.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class IdeaStatus(str, Enum):
    """Workflow status of an idea, declared in canonical forward order."""

    PROPOSED = "proposed"
    UNDER_REVIEW = "under_review"
    VALIDATED = "validated"
    INVESTMENT_READY = "investment_ready"

    @property
    def ordinal(self) -> int:
        return CANONICAL_ORDER.index(self)

    @property
    def next_stage(self) -> "IdeaStatus | None":
        """The next canonical stage, or None for the terminal stage."""
        idx = self.ordinal + 1
        return CANONICAL_ORDER[idx] if idx < len(CANONICAL_ORDER) else None


CANONICAL_ORDER: tuple[IdeaStatus, ...] = tuple(IdeaStatus)


class TransitionPolicy(str, Enum):
    """Which status changes an administrator may apply."""

    ADMIN_OVERRIDE = "admin_override"  # any status to any other status
    FORWARD_ONLY = "forward_only"  # only the next canonical stage


@dataclass(frozen=True)
class StageInfo:
    status: IdeaStatus
    label: str
    description: str


STAGE_CATALOG: dict[IdeaStatus, StageInfo] = {
    IdeaStatus.PROPOSED: StageInfo(IdeaStatus.PROPOSED, "Proposed", "Initial idea submission"),
    IdeaStatus.UNDER_REVIEW: StageInfo(
        IdeaStatus.UNDER_REVIEW, "Under Review", "Being evaluated by the community"
    ),
    IdeaStatus.VALIDATED: StageInfo(IdeaStatus.VALIDATED, "Validated", "Passed evaluation criteria"),
    IdeaStatus.INVESTMENT_READY: StageInfo(
        IdeaStatus.INVESTMENT_READY, "Investment Ready", "Ready for investment consideration"
    ),
}


@dataclass
class TransitionResult:
    """Result of a transition check."""

    allowed: bool
    reason: str = ""
    new_status: IdeaStatus | None = None


def validate_transition(
    current_status: IdeaStatus | None,
    target_status: IdeaStatus,
    policy: TransitionPolicy = TransitionPolicy.ADMIN_OVERRIDE,
) -> TransitionResult:
    """Validate whether a status change is allowed under the given policy.

    Pure function -- no side effects, no DB access.

    Rules:
        - Same-status changes are rejected under every policy
        - ADMIN_OVERRIDE: any other status is allowed (skip-ahead and backward included)
        - FORWARD_ONLY: only the next canonical stage is allowed
        - An idea with no status yet is treated as PROPOSED for FORWARD_ONLY

    Criteria are never consulted here; they are advisory for the admin.
    """
    if target_status == current_status:
        return TransitionResult(False, "Already at this status")

    if policy == TransitionPolicy.FORWARD_ONLY:
        base = current_status or IdeaStatus.PROPOSED
        if base.next_stage != target_status:
            if base.next_stage is None:
                return TransitionResult(False, f"'{base.value}' is the final stage")
            return TransitionResult(
                False, f"Only '{base.next_stage.value}' may follow '{base.value}'"
            )

    return TransitionResult(True, new_status=target_status)


def selectable_targets(
    current_status: IdeaStatus | None,
    policy: TransitionPolicy = TransitionPolicy.ADMIN_OVERRIDE,
) -> list[IdeaStatus]:
    """Statuses an admin may pick for an idea currently at ``current_status``."""
    return [s for s in CANONICAL_ORDER if validate_transition(current_status, s, policy).allowed]


@dataclass(frozen=True)
class TransitionRecord:
    """One immutable entry of an idea's status history."""

    id: uuid.UUID
    idea_id: uuid.UUID
    from_status: str | None
    to_status: str
    reason: str | None
    changed_by: uuid.UUID
    created_at: datetime
    changer_name: str | None = None
