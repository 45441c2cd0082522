"""WorkflowService: applies admin status changes and serves status history.

Criteria are advisory: apply_status_change never consults them. The only gate
is the configured TransitionPolicy (admin override by default).
"""

import uuid
from dataclasses import dataclass
from typing import Literal

import structlog

from ideaflow.core.auth import AdminCapability
from ideaflow.core.exceptions import IdeaNotFoundError, StaleStatusError, StoreUnavailableError
from ideaflow.db.workflow_store import WorkflowStore
from ideaflow.domain.stages import (
    IdeaStatus,
    TransitionPolicy,
    TransitionRecord,
    selectable_targets,
    validate_transition,
)

logger = structlog.get_logger(__name__)

FailureCode = Literal["not_found", "stale", "rejected", "unavailable"]


@dataclass
class StatusChangeResult:
    """Outcome of apply_status_change. On failure the idea's status is unchanged."""

    success: bool
    transition: TransitionRecord | None = None
    error: str | None = None
    error_code: FailureCode | None = None

    @classmethod
    def failed(cls, code: FailureCode, error: str) -> "StatusChangeResult":
        return cls(success=False, error=error, error_code=code)


class WorkflowService:
    """Service layer for idea status changes.

    Every status change:
    - Requires an AdminCapability obtained by the caller
    - Is checked against the transition policy
    - Updates the idea and appends a workflow transition atomically
    """

    def __init__(
        self,
        store: WorkflowStore,
        policy: TransitionPolicy = TransitionPolicy.ADMIN_OVERRIDE,
    ):
        """Initialize with dependency-injected store and policy.

        Args:
            store: WorkflowStore implementation
            policy: Which status changes are accepted
        """
        self.store = store
        self.policy = policy

    async def apply_status_change(
        self,
        idea_id: uuid.UUID,
        new_status: IdeaStatus | str,
        reason: str | None,
        admin: AdminCapability,
        expected_status: IdeaStatus | str | None = None,
    ) -> StatusChangeResult:
        """Move an idea to ``new_status`` and record the transition.

        Args:
            idea_id: UUID of the idea
            new_status: Target status
            reason: Optional free-text reason (blank is stored as None)
            admin: Verified administrator performing the change
            expected_status: Status the caller believes the idea is in. When
                given, the change fails as "stale" if the idea has moved on.

        Returns:
            StatusChangeResult with the recorded transition on success, or an
            error_code of "not_found", "stale", "rejected" or "unavailable".

        Raises:
            TypeError: ``admin`` is not an AdminCapability
            ValueError: a status string outside the IdeaStatus enum
        """
        if not isinstance(admin, AdminCapability):
            raise TypeError("apply_status_change requires an AdminCapability")

        new_status = IdeaStatus(new_status)
        expected = IdeaStatus(expected_status) if expected_status is not None else None
        reason = (reason or "").strip() or None
        log = logger.bind(idea_id=str(idea_id), to_status=new_status.value, changed_by=str(admin.user_id))

        try:
            current = await self.store.get_idea_status(idea_id)
            if expected is not None and current != expected:
                raise StaleStatusError(idea_id, expected.value, current.value)

            check = validate_transition(current, new_status, self.policy)
            if not check.allowed:
                log.info("status_change_rejected", from_status=current.value, reason=check.reason)
                return StatusChangeResult.failed("rejected", check.reason)

            # Compare-and-swap against the status the policy check saw
            transition = await self.store.update_idea_status_and_log_transition(
                idea_id=idea_id,
                new_status=new_status,
                reason=reason,
                acting_user_id=admin.user_id,
                expected_status=current,
            )
        except IdeaNotFoundError as exc:
            log.info("status_change_failed", error_code="not_found")
            return StatusChangeResult.failed("not_found", str(exc))
        except StaleStatusError as exc:
            log.warning("status_change_failed", error_code="stale", error=str(exc))
            return StatusChangeResult.failed("stale", str(exc))
        except StoreUnavailableError as exc:
            log.error("status_change_failed", error_code="unavailable", error=str(exc))
            return StatusChangeResult.failed("unavailable", "Status could not be updated")

        log.info("status_changed", from_status=transition.from_status)
        return StatusChangeResult(success=True, transition=transition)

    async def get_history(self, idea_id: uuid.UUID) -> list[TransitionRecord]:
        """Status history for an idea, newest first.

        Raises:
            StoreUnavailableError: the store could not be read
        """
        return await self.store.fetch_transition_history(idea_id)

    async def get_selectable_targets(self, idea_id: uuid.UUID) -> tuple[IdeaStatus, list[IdeaStatus]]:
        """Current status and the statuses an admin may move the idea to."""
        current = await self.store.get_idea_status(idea_id)
        return current, selectable_targets(current, self.policy)
