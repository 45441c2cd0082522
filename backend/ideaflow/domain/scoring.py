"""Deterministic scorecard computations.

Pure functions with no external dependencies.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from ideaflow.domain.criteria import EvaluationScores

DIMENSIONS = ("market_size", "feasibility", "strategic_fit", "novelty")


@dataclass(frozen=True)
class VoteStats:
    upvotes: int
    downvotes: int

    @property
    def total(self) -> int:
        return self.upvotes + self.downvotes

    @property
    def net(self) -> int:
        return self.upvotes - self.downvotes


def compute_vote_stats(votes: Sequence[bool]) -> VoteStats:
    """Tally boolean votes (True = upvote)."""
    upvotes = sum(1 for v in votes if v)
    return VoteStats(upvotes=upvotes, downvotes=len(votes) - upvotes)


def compute_dimension_averages(scores: Sequence[EvaluationScores]) -> dict[str, float] | None:
    """Average of each sub-score across evaluations.

    Returns None when there are no evaluations. Missing sub-scores count as 0
    and still count toward the denominator.
    """
    if not scores:
        return None

    return {
        dim: sum(getattr(s, dim) or 0 for s in scores) / len(scores)
        for dim in DIMENSIONS
    }
