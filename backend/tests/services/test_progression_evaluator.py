"""Tests for ProgressionEvaluator using the in-memory workflow store."""
import pytest

from ideaflow.domain.criteria import FETCH_ERROR_MESSAGE
from ideaflow.domain.stages import IdeaStatus
from ideaflow.services.progression import ProgressionEvaluator

pytestmark = pytest.mark.unit

FIVE_GOOD_SCORES = [(4, 3, 3, 3)] * 5


class TestSubmissionEdge:
    async def test_two_votes_one_comment_no_evaluations(self, fake_store):
        idea_id = fake_store.add_idea()
        fake_store.set_signals(idea_id, upvotes=2, comments=1)

        report = await ProgressionEvaluator(fake_store).evaluate_progression(
            idea_id, "proposed", "under_review"
        )

        assert report.can_progress is False
        assert len(report.unmet_criteria) == 1
        assert "evaluation" in report.unmet_criteria[0]
        assert report.met_criteria == ["Community engagement: 3 votes and comments"]

    async def test_ready_for_review(self, fake_store):
        idea_id = fake_store.add_idea()
        fake_store.set_signals(idea_id, upvotes=1, downvotes=1, comments=1, scores=[(3, 3, 3, 3)])

        report = await ProgressionEvaluator(fake_store).evaluate_progression(
            idea_id, IdeaStatus.PROPOSED, IdeaStatus.UNDER_REVIEW
        )

        assert report.can_progress is True
        assert report.unmet_criteria == []

    async def test_reads_only_what_the_edge_needs(self, fake_store):
        idea_id = fake_store.add_idea()

        await ProgressionEvaluator(fake_store).evaluate_progression(
            idea_id, "proposed", "under_review"
        )

        assert sorted(fake_store.calls) == ["count_evaluations", "count_votes_and_comments"]


class TestReviewEdge:
    async def test_all_met(self, fake_store):
        idea_id = fake_store.add_idea(IdeaStatus.UNDER_REVIEW)
        fake_store.set_signals(idea_id, comments=3, scores=FIVE_GOOD_SCORES)

        report = await ProgressionEvaluator(fake_store).evaluate_progression(
            idea_id, "under_review", "validated"
        )

        assert report.can_progress is True
        assert len(report.met_criteria) == 3

    async def test_no_evaluations_reports_gap_without_average(self, fake_store):
        idea_id = fake_store.add_idea(IdeaStatus.UNDER_REVIEW)
        fake_store.set_signals(idea_id, comments=3)

        report = await ProgressionEvaluator(fake_store).evaluate_progression(
            idea_id, "under_review", "validated"
        )

        assert report.unmet_criteria == ["Need 5 more evaluations"]


class TestInvestmentEdge:
    async def test_missing_document(self, fake_store):
        idea_id = fake_store.add_idea(IdeaStatus.VALIDATED)
        fake_store.set_signals(idea_id, investor_interest=4)

        report = await ProgressionEvaluator(fake_store).evaluate_progression(
            idea_id, "validated", "investment_ready"
        )

        assert report.can_progress is False
        assert report.unmet_criteria == ["Need at least 1 supporting document"]


class TestEdgesWithoutCriteria:
    @pytest.mark.parametrize(
        "from_status,to_status",
        [
            ("proposed", "validated"),
            ("validated", "under_review"),
            ("investment_ready", "proposed"),
            ("under_review", "under_review"),
        ],
    )
    async def test_permissive_empty_report(self, fake_store, from_status, to_status):
        idea_id = fake_store.add_idea()

        report = await ProgressionEvaluator(fake_store).evaluate_progression(
            idea_id, from_status, to_status
        )

        assert report.can_progress is True
        assert report.met_criteria == []
        assert report.unmet_criteria == []
        assert fake_store.calls == []


class TestFetchFailures:
    @pytest.mark.parametrize(
        "from_status,to_status,failing",
        [
            ("proposed", "under_review", "count_evaluations"),
            ("under_review", "validated", "fetch_evaluation_scores"),
            ("validated", "investment_ready", "count_documents"),
        ],
    )
    async def test_failure_is_fail_closed(self, fake_store, from_status, to_status, failing):
        idea_id = fake_store.add_idea()
        fake_store.set_signals(
            idea_id, upvotes=5, comments=5, scores=FIVE_GOOD_SCORES, investor_interest=5, documents=2
        )
        fake_store.fail_on.add(failing)

        report = await ProgressionEvaluator(fake_store).evaluate_progression(
            idea_id, from_status, to_status
        )

        assert report.can_progress is False
        assert report.met_criteria == []
        assert report.unmet_criteria == [FETCH_ERROR_MESSAGE]

    async def test_other_reads_still_complete(self, fake_store):
        idea_id = fake_store.add_idea(IdeaStatus.UNDER_REVIEW)
        fake_store.fail_on.add("count_evaluations")
        fake_store.slow_ops["count_comments"] = 5

        await ProgressionEvaluator(fake_store).evaluate_progression(
            idea_id, "under_review", "validated"
        )

        assert set(fake_store.completed) == {"fetch_evaluation_scores", "count_comments"}


class TestInvalidInput:
    async def test_unknown_status_raises(self, fake_store):
        with pytest.raises(ValueError):
            await ProgressionEvaluator(fake_store).evaluate_progression(
                fake_store.add_idea(), "proposed", "archived"
            )
