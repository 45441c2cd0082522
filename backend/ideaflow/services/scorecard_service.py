"""ScorecardService: per-idea summary of community signals."""

import uuid
from dataclasses import dataclass

from ideaflow.db.workflow_store import WorkflowStore, gather_reads
from ideaflow.domain.criteria import composite_average
from ideaflow.domain.scoring import VoteStats, compute_dimension_averages, compute_vote_stats
from ideaflow.domain.stages import IdeaStatus


@dataclass
class Scorecard:
    idea_id: uuid.UUID
    status: IdeaStatus
    votes: VoteStats
    comment_count: int
    evaluation_count: int
    dimension_averages: dict[str, float] | None
    composite_average: float | None
    investor_interest_count: int
    document_count: int


class ScorecardService:
    """Aggregates votes, evaluations, interest and documents for one idea."""

    def __init__(self, store: WorkflowStore):
        self.store = store

    async def get_scorecard(self, idea_id: uuid.UUID) -> Scorecard:
        """Build the scorecard for an idea.

        Raises:
            IdeaNotFoundError: no idea with this id
            StoreUnavailableError: the store could not be read
        """
        status = await self.store.get_idea_status(idea_id)
        votes, comments, scores, interest, documents = await gather_reads(
            self.store.fetch_votes(idea_id),
            self.store.count_comments(idea_id),
            self.store.fetch_evaluation_scores(idea_id),
            self.store.count_investor_interest(idea_id),
            self.store.count_documents(idea_id),
        )

        return Scorecard(
            idea_id=idea_id,
            status=status,
            votes=compute_vote_stats(votes),
            comment_count=comments,
            evaluation_count=len(scores),
            dimension_averages=compute_dimension_averages(scores),
            composite_average=composite_average(scores),
            investor_interest_count=interest,
            document_count=documents,
        )
