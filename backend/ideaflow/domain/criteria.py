"""Stage-advancement criteria.

Pure domain functions that turn community signal counts into a criteria
report. No I/O, no side effects, fully deterministic. Fetching the counts is
the job of services.progression.ProgressionEvaluator.

Criteria per canonical edge:
    proposed -> under_review:
        votes + comments >= 3, evaluations >= 1
    under_review -> validated:
        evaluations >= 5, average composite score >= 12 (of 20), comments >= 3
    validated -> investment_ready:
        investor interest >= 3, documents >= 1
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from ideaflow.domain.stages import IdeaStatus

MIN_INTERACTIONS_FOR_REVIEW = 3
MIN_EVALUATIONS_FOR_REVIEW = 1

MIN_EVALUATIONS_FOR_VALIDATION = 5
MIN_AVERAGE_SCORE_FOR_VALIDATION = 12.0
MAX_COMPOSITE_SCORE = 20
MIN_COMMENTS_FOR_VALIDATION = 3

MIN_INVESTOR_INTEREST_FOR_INVESTMENT = 3
MIN_DOCUMENTS_FOR_INVESTMENT = 1

FETCH_ERROR_MESSAGE = "Error checking criteria"

SUBMISSION_EDGE = (IdeaStatus.PROPOSED, IdeaStatus.UNDER_REVIEW)
REVIEW_EDGE = (IdeaStatus.UNDER_REVIEW, IdeaStatus.VALIDATED)
INVESTMENT_EDGE = (IdeaStatus.VALIDATED, IdeaStatus.INVESTMENT_READY)

CRITERIA_EDGES: frozenset[tuple[IdeaStatus, IdeaStatus]] = frozenset(
    {SUBMISSION_EDGE, REVIEW_EDGE, INVESTMENT_EDGE}
)


@dataclass(frozen=True)
class EvaluationScores:
    """Sub-scores (1-5) of a single evaluation. Missing sub-scores count as 0."""

    market_size: int | None
    feasibility: int | None
    strategic_fit: int | None
    novelty: int | None

    @property
    def composite(self) -> int:
        return (
            (self.market_size or 0)
            + (self.feasibility or 0)
            + (self.strategic_fit or 0)
            + (self.novelty or 0)
        )


@dataclass
class CriteriaReport:
    """Outcome of evaluating one (from, to) status pair."""

    met_criteria: list[str] = field(default_factory=list)
    unmet_criteria: list[str] = field(default_factory=list)

    @property
    def can_progress(self) -> bool:
        return not self.unmet_criteria

    def check(self, passed: bool, met_message: str, unmet_message: str) -> None:
        if passed:
            self.met_criteria.append(met_message)
        else:
            self.unmet_criteria.append(unmet_message)

    @classmethod
    def fetch_failed(cls) -> "CriteriaReport":
        """Fail-closed report used when the inputs could not be gathered."""
        return cls(unmet_criteria=[FETCH_ERROR_MESSAGE])


def has_criteria(from_status: IdeaStatus, to_status: IdeaStatus) -> bool:
    """True when (from_status, to_status) is one of the three canonical edges."""
    return (from_status, to_status) in CRITERIA_EDGES


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def composite_average(scores: Sequence[EvaluationScores]) -> float | None:
    """Average per-evaluation composite score, or None when there are no evaluations."""
    if not scores:
        return None
    return sum(s.composite for s in scores) / len(scores)


def evaluate_submission_criteria(votes: int, comments: int, evaluations: int) -> CriteriaReport:
    """Criteria for proposed -> under_review."""
    report = CriteriaReport()

    interactions = votes + comments
    report.check(
        interactions >= MIN_INTERACTIONS_FOR_REVIEW,
        f"Community engagement: {interactions} votes and comments",
        f"Need {MIN_INTERACTIONS_FOR_REVIEW - interactions} more votes or comments",
    )
    report.check(
        evaluations >= MIN_EVALUATIONS_FOR_REVIEW,
        f"{_plural(evaluations, 'evaluation')} submitted",
        f"Need {MIN_EVALUATIONS_FOR_REVIEW - evaluations} more evaluation",
    )
    return report


def evaluate_review_criteria(
    evaluations: int,
    scores: Sequence[EvaluationScores],
    comments: int,
) -> CriteriaReport:
    """Criteria for under_review -> validated.

    With no evaluation scores the average-score criterion is skipped: it
    lands in neither list. The evaluation-count criterion still reports the gap.
    """
    report = CriteriaReport()

    report.check(
        evaluations >= MIN_EVALUATIONS_FOR_VALIDATION,
        f"{_plural(evaluations, 'evaluation')} submitted",
        f"Need {MIN_EVALUATIONS_FOR_VALIDATION - evaluations} more evaluations",
    )

    average = composite_average(scores)
    if average is not None:
        report.check(
            average >= MIN_AVERAGE_SCORE_FOR_VALIDATION,
            f"Average evaluation score {average:.1f}/{MAX_COMPOSITE_SCORE}",
            f"Average evaluation score {average:.1f}/{MAX_COMPOSITE_SCORE} is below "
            f"{MIN_AVERAGE_SCORE_FOR_VALIDATION:.0f}",
        )

    report.check(
        comments >= MIN_COMMENTS_FOR_VALIDATION,
        f"{_plural(comments, 'comment')} from the community",
        f"Need {MIN_COMMENTS_FOR_VALIDATION - comments} more comments",
    )
    return report


def evaluate_investment_criteria(investor_interest: int, documents: int) -> CriteriaReport:
    """Criteria for validated -> investment_ready."""
    report = CriteriaReport()

    report.check(
        investor_interest >= MIN_INVESTOR_INTEREST_FOR_INVESTMENT,
        f"{_plural(investor_interest, 'investor')} interested",
        f"Need {MIN_INVESTOR_INTEREST_FOR_INVESTMENT - investor_interest} more investor interest",
    )
    report.check(
        documents >= MIN_DOCUMENTS_FOR_INVESTMENT,
        f"{_plural(documents, 'document')} attached",
        "Need at least 1 supporting document",
    )
    return report
