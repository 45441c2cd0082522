"""Shared test fixtures for all test groups."""

import asyncio
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone

import pytest

from ideaflow.core.auth import AdminCapability
from ideaflow.core.exceptions import IdeaNotFoundError, StaleStatusError, StoreUnavailableError
from ideaflow.db.workflow_store import VoteCommentCounts
from ideaflow.domain.criteria import EvaluationScores
from ideaflow.domain.stages import IdeaStatus, TransitionRecord


class FakeWorkflowStore:
    """In-memory WorkflowStore.

    Set ``fail_on`` to operation names (or "*") to make them raise
    StoreUnavailableError. ``slow_ops`` maps an operation to extra event-loop
    yields before it completes. ``calls`` / ``completed`` record every operation.
    """

    def __init__(self):
        self.statuses: dict[uuid.UUID, IdeaStatus] = {}
        self.votes: dict[uuid.UUID, list[bool]] = defaultdict(list)
        self.comments: dict[uuid.UUID, int] = defaultdict(int)
        self.scores: dict[uuid.UUID, list[EvaluationScores]] = defaultdict(list)
        self.investor_interest: dict[uuid.UUID, int] = defaultdict(int)
        self.documents: dict[uuid.UUID, int] = defaultdict(int)
        self.transitions: dict[uuid.UUID, list[TransitionRecord]] = defaultdict(list)
        self.profiles: dict[uuid.UUID, tuple[str, str]] = {}
        self.fail_on: set[str] = set()
        self.slow_ops: dict[str, int] = {}
        self.calls: list[str] = []
        self.completed: list[str] = []
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    # -- seeding helpers ---------------------------------------------------

    def add_idea(self, status: IdeaStatus = IdeaStatus.PROPOSED) -> uuid.UUID:
        idea_id = uuid.uuid4()
        self.statuses[idea_id] = status
        return idea_id

    def add_profile(self, name: str, role: str = "member") -> uuid.UUID:
        user_id = uuid.uuid4()
        self.profiles[user_id] = (name, role)
        return user_id

    def set_signals(
        self,
        idea_id: uuid.UUID,
        *,
        upvotes: int = 0,
        downvotes: int = 0,
        comments: int = 0,
        scores: list[tuple[int, int, int, int]] | None = None,
        investor_interest: int = 0,
        documents: int = 0,
    ) -> None:
        self.votes[idea_id] = [True] * upvotes + [False] * downvotes
        self.comments[idea_id] = comments
        self.scores[idea_id] = [EvaluationScores(*s) for s in (scores or [])]
        self.investor_interest[idea_id] = investor_interest
        self.documents[idea_id] = documents

    async def _op(self, name: str) -> None:
        self.calls.append(name)
        for _ in range(1 + self.slow_ops.get(name, 0)):
            await asyncio.sleep(0)
        if name in self.fail_on or "*" in self.fail_on:
            raise StoreUnavailableError(f"{name} failed: connection refused")
        self.completed.append(name)

    # -- WorkflowStore -----------------------------------------------------

    async def count_votes_and_comments(self, idea_id):
        await self._op("count_votes_and_comments")
        return VoteCommentCounts(votes=len(self.votes[idea_id]), comments=self.comments[idea_id])

    async def count_evaluations(self, idea_id):
        await self._op("count_evaluations")
        return len(self.scores[idea_id])

    async def fetch_evaluation_scores(self, idea_id):
        await self._op("fetch_evaluation_scores")
        return list(self.scores[idea_id])

    async def count_comments(self, idea_id):
        await self._op("count_comments")
        return self.comments[idea_id]

    async def count_investor_interest(self, idea_id):
        await self._op("count_investor_interest")
        return self.investor_interest[idea_id]

    async def count_documents(self, idea_id):
        await self._op("count_documents")
        return self.documents[idea_id]

    async def fetch_votes(self, idea_id):
        await self._op("fetch_votes")
        return list(self.votes[idea_id])

    async def get_idea_status(self, idea_id):
        await self._op("get_idea_status")
        if idea_id not in self.statuses:
            raise IdeaNotFoundError(idea_id)
        return self.statuses[idea_id]

    async def get_profile_role(self, user_id):
        await self._op("get_profile_role")
        profile = self.profiles.get(user_id)
        return profile[1] if profile else None

    async def update_idea_status_and_log_transition(
        self, idea_id, new_status, reason, acting_user_id, expected_status=None
    ):
        await self._op("update_idea_status_and_log_transition")
        if idea_id not in self.statuses:
            raise IdeaNotFoundError(idea_id)
        current = self.statuses[idea_id]
        if expected_status is not None and current != expected_status:
            raise StaleStatusError(idea_id, expected_status.value, current.value)

        self._clock += timedelta(seconds=1)
        record = TransitionRecord(
            id=uuid.uuid4(),
            idea_id=idea_id,
            from_status=current.value,
            to_status=new_status.value,
            reason=reason,
            changed_by=acting_user_id,
            created_at=self._clock,
        )
        self.statuses[idea_id] = new_status
        self.transitions[idea_id].append(record)
        return record

    async def fetch_transition_history(self, idea_id):
        await self._op("fetch_transition_history")
        records = sorted(self.transitions[idea_id], key=lambda r: r.created_at, reverse=True)
        return [
            TransitionRecord(
                **{**r.__dict__, "changer_name": self.profiles.get(r.changed_by, (None, None))[0]}
            )
            for r in records
        ]


@pytest.fixture
def fake_store() -> FakeWorkflowStore:
    """Fresh in-memory workflow store."""
    return FakeWorkflowStore()


@pytest.fixture
def admin(fake_store: FakeWorkflowStore) -> AdminCapability:
    """Admin capability for a profile registered in the fake store."""
    return AdminCapability(user_id=fake_store.add_profile("Ada Admin", role="admin"))
