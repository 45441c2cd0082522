"""ProgressionEvaluator: gathers community signals and reports stage criteria.

Read-only. The criteria rules live in domain.criteria; this service fetches
the inputs each edge needs (concurrently), feeds them to the pure functions
and turns fetch failures into a fail-closed report.
"""

import uuid

import structlog

from ideaflow.core.exceptions import StoreUnavailableError
from ideaflow.db.workflow_store import WorkflowStore, gather_reads
from ideaflow.domain.criteria import (
    INVESTMENT_EDGE,
    REVIEW_EDGE,
    SUBMISSION_EDGE,
    CriteriaReport,
    evaluate_investment_criteria,
    evaluate_review_criteria,
    evaluate_submission_criteria,
)
from ideaflow.domain.stages import IdeaStatus

logger = structlog.get_logger(__name__)


class ProgressionEvaluator:
    """Evaluates whether an idea meets the criteria for a status change."""

    def __init__(self, store: WorkflowStore):
        self.store = store

    async def evaluate_progression(
        self,
        idea_id: uuid.UUID,
        from_status: IdeaStatus | str,
        to_status: IdeaStatus | str,
    ) -> CriteriaReport:
        """Evaluate the criteria for moving ``idea_id`` from ``from_status`` to ``to_status``.

        Args:
            idea_id: UUID of the idea
            from_status: Status the idea would leave
            to_status: Status under consideration

        Returns:
            CriteriaReport. For a pair that is not one of the three canonical
            forward edges the report is empty and ``can_progress`` is True.
            If the store fails, the report carries a single
            "Error checking criteria" entry and ``can_progress`` is False.

        Raises:
            ValueError: a status string outside the IdeaStatus enum
        """
        from_status = IdeaStatus(from_status)
        to_status = IdeaStatus(to_status)
        edge = (from_status, to_status)

        try:
            if edge == SUBMISSION_EDGE:
                counts, evaluations = await gather_reads(
                    self.store.count_votes_and_comments(idea_id),
                    self.store.count_evaluations(idea_id),
                )
                report = evaluate_submission_criteria(counts.votes, counts.comments, evaluations)
            elif edge == REVIEW_EDGE:
                evaluations, scores, comments = await gather_reads(
                    self.store.count_evaluations(idea_id),
                    self.store.fetch_evaluation_scores(idea_id),
                    self.store.count_comments(idea_id),
                )
                report = evaluate_review_criteria(evaluations, scores, comments)
            elif edge == INVESTMENT_EDGE:
                interest, documents = await gather_reads(
                    self.store.count_investor_interest(idea_id),
                    self.store.count_documents(idea_id),
                )
                report = evaluate_investment_criteria(interest, documents)
            else:
                logger.warning(
                    "progression_edge_without_criteria",
                    idea_id=str(idea_id),
                    from_status=from_status.value,
                    to_status=to_status.value,
                )
                return CriteriaReport()
        except StoreUnavailableError as exc:
            logger.error(
                "progression_criteria_fetch_failed",
                idea_id=str(idea_id),
                from_status=from_status.value,
                to_status=to_status.value,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return CriteriaReport.fetch_failed()

        logger.info(
            "progression_evaluated",
            idea_id=str(idea_id),
            from_status=from_status.value,
            to_status=to_status.value,
            can_progress=report.can_progress,
            unmet=len(report.unmet_criteria),
        )
        return report
