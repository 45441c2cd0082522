"""Tests for stage-advancement criteria (pure functions)."""
import pytest

from ideaflow.domain.criteria import (
    FETCH_ERROR_MESSAGE,
    CriteriaReport,
    EvaluationScores,
    composite_average,
    evaluate_investment_criteria,
    evaluate_review_criteria,
    evaluate_submission_criteria,
    has_criteria,
)
from ideaflow.domain.stages import IdeaStatus

pytestmark = pytest.mark.unit


def _scores(*rows: tuple[int, int, int, int]) -> list[EvaluationScores]:
    return [EvaluationScores(*row) for row in rows]


class TestCriteriaReport:
    def test_empty_report_can_progress(self):
        report = CriteriaReport()
        assert report.can_progress is True
        assert report.met_criteria == []
        assert report.unmet_criteria == []

    def test_unmet_entry_blocks_progress(self):
        report = CriteriaReport()
        report.check(False, "ok", "not ok")
        assert report.can_progress is False
        assert report.unmet_criteria == ["not ok"]

    def test_fetch_failed_is_fail_closed(self):
        report = CriteriaReport.fetch_failed()
        assert report.can_progress is False
        assert report.met_criteria == []
        assert report.unmet_criteria == [FETCH_ERROR_MESSAGE]


class TestHasCriteria:
    def test_canonical_edges(self):
        assert has_criteria(IdeaStatus.PROPOSED, IdeaStatus.UNDER_REVIEW)
        assert has_criteria(IdeaStatus.UNDER_REVIEW, IdeaStatus.VALIDATED)
        assert has_criteria(IdeaStatus.VALIDATED, IdeaStatus.INVESTMENT_READY)

    def test_other_pairs(self):
        assert not has_criteria(IdeaStatus.PROPOSED, IdeaStatus.VALIDATED)
        assert not has_criteria(IdeaStatus.VALIDATED, IdeaStatus.UNDER_REVIEW)
        assert not has_criteria(IdeaStatus.INVESTMENT_READY, IdeaStatus.PROPOSED)
        assert not has_criteria(IdeaStatus.PROPOSED, IdeaStatus.PROPOSED)


class TestCompositeAverage:
    def test_average_of_sums(self):
        assert composite_average(_scores((5, 5, 5, 5), (1, 1, 1, 1))) == 12.0

    def test_single_evaluation(self):
        assert composite_average(_scores((3, 4, 2, 5))) == 14.0

    def test_no_evaluations_returns_none(self):
        assert composite_average([]) is None

    def test_missing_sub_scores_count_as_zero(self):
        assert composite_average([EvaluationScores(5, None, 5, None)]) == 10.0


class TestSubmissionCriteria:
    """proposed -> under_review."""

    def test_all_met(self):
        report = evaluate_submission_criteria(votes=2, comments=1, evaluations=1)
        assert report.can_progress is True
        assert report.unmet_criteria == []
        assert len(report.met_criteria) == 2

    def test_interactions_one_short(self):
        report = evaluate_submission_criteria(votes=1, comments=1, evaluations=1)
        assert report.can_progress is False
        assert report.unmet_criteria == ["Need 1 more votes or comments"]
        assert len(report.met_criteria) == 1

    def test_no_evaluations(self):
        report = evaluate_submission_criteria(votes=3, comments=0, evaluations=0)
        assert report.unmet_criteria == ["Need 1 more evaluation"]

    def test_two_votes_one_comment_no_evaluations(self):
        """Votes + comments = 3 is met; only the evaluation criterion is unmet."""
        report = evaluate_submission_criteria(votes=2, comments=1, evaluations=0)
        assert report.can_progress is False
        assert len(report.unmet_criteria) == 1
        assert "evaluation" in report.unmet_criteria[0]
        assert report.met_criteria == ["Community engagement: 3 votes and comments"]


class TestReviewCriteria:
    """under_review -> validated."""

    def test_all_met(self):
        scores = _scores(*[(3, 3, 3, 3)] * 5)
        report = evaluate_review_criteria(evaluations=5, scores=scores, comments=3)
        assert report.can_progress is True
        assert len(report.met_criteria) == 3

    def test_evaluations_one_short(self):
        scores = _scores(*[(4, 4, 4, 4)] * 4)
        report = evaluate_review_criteria(evaluations=4, scores=scores, comments=3)
        assert report.unmet_criteria == ["Need 1 more evaluations"]
        assert len(report.met_criteria) == 2

    def test_average_exactly_at_threshold_is_met(self):
        scores = _scores((5, 5, 5, 5), (1, 1, 1, 1), (3, 3, 3, 3), (3, 3, 3, 3), (3, 3, 3, 3))
        report = evaluate_review_criteria(evaluations=5, scores=scores, comments=3)
        assert report.can_progress is True
        assert "Average evaluation score 12.0/20" in report.met_criteria

    def test_average_below_threshold(self):
        scores = _scores(*[(3, 3, 3, 2)] * 5)
        report = evaluate_review_criteria(evaluations=5, scores=scores, comments=3)
        assert report.unmet_criteria == ["Average evaluation score 11.0/20 is below 12"]

    def test_comments_one_short(self):
        scores = _scores(*[(3, 3, 3, 3)] * 5)
        report = evaluate_review_criteria(evaluations=5, scores=scores, comments=2)
        assert report.unmet_criteria == ["Need 1 more comments"]

    def test_zero_evaluations_skips_average_criterion(self):
        report = evaluate_review_criteria(evaluations=0, scores=[], comments=3)
        assert report.unmet_criteria == ["Need 5 more evaluations"]
        assert not any("Average" in m for m in report.met_criteria + report.unmet_criteria)
        assert len(report.met_criteria) == 1


class TestInvestmentCriteria:
    """validated -> investment_ready."""

    def test_all_met(self):
        report = evaluate_investment_criteria(investor_interest=3, documents=1)
        assert report.can_progress is True
        assert report.met_criteria == ["3 investors interested", "1 document attached"]

    def test_interest_one_short(self):
        report = evaluate_investment_criteria(investor_interest=2, documents=4)
        assert report.unmet_criteria == ["Need 1 more investor interest"]

    def test_no_documents(self):
        report = evaluate_investment_criteria(investor_interest=5, documents=0)
        assert report.unmet_criteria == ["Need at least 1 supporting document"]
