"""WorkflowStore: data access for the workflow evaluator and executor.

``WorkflowStore`` is the interface the services depend on; ``SqlWorkflowStore``
implements it on top of the async SQLAlchemy session factory. Every read opens
its own session so independent reads can be awaited concurrently. Driver and
connection failures surface as StoreUnavailableError.
"""

import asyncio
import uuid
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ideaflow.core.exceptions import IdeaNotFoundError, StaleStatusError, StoreUnavailableError
from ideaflow.db.models.comment import Comment
from ideaflow.db.models.document import Document
from ideaflow.db.models.evaluation import Evaluation
from ideaflow.db.models.idea import Idea
from ideaflow.db.models.investor_interest import InvestorInterest
from ideaflow.db.models.profile import Profile
from ideaflow.db.models.vote import Vote
from ideaflow.db.models.workflow_transition import WorkflowTransition
from ideaflow.domain.criteria import EvaluationScores
from ideaflow.domain.stages import IdeaStatus, TransitionRecord


@dataclass(frozen=True)
class VoteCommentCounts:
    votes: int
    comments: int


class WorkflowStore(Protocol):
    """Read/write operations consumed by the workflow services.

    Implementations must raise StoreUnavailableError for every driver,
    connection or query failure, never the underlying error. The progression
    evaluator fails closed only on StoreUnavailableError, and the status
    executor maps it to "unavailable". Lookups of a missing idea raise
    IdeaNotFoundError. A lost compare-and-swap raises StaleStatusError.
    """

    async def count_votes_and_comments(self, idea_id: uuid.UUID) -> VoteCommentCounts: ...

    async def count_evaluations(self, idea_id: uuid.UUID) -> int: ...

    async def fetch_evaluation_scores(self, idea_id: uuid.UUID) -> list[EvaluationScores]: ...

    async def count_comments(self, idea_id: uuid.UUID) -> int: ...

    async def count_investor_interest(self, idea_id: uuid.UUID) -> int: ...

    async def count_documents(self, idea_id: uuid.UUID) -> int: ...

    async def fetch_votes(self, idea_id: uuid.UUID) -> list[bool]: ...

    async def get_idea_status(self, idea_id: uuid.UUID) -> IdeaStatus: ...

    async def get_profile_role(self, user_id: uuid.UUID) -> str | None: ...

    async def update_idea_status_and_log_transition(
        self,
        idea_id: uuid.UUID,
        new_status: IdeaStatus,
        reason: str | None,
        acting_user_id: uuid.UUID,
        expected_status: IdeaStatus | None = None,
    ) -> TransitionRecord: ...

    async def fetch_transition_history(self, idea_id: uuid.UUID) -> list[TransitionRecord]: ...


async def gather_reads(*aws: Awaitable) -> list:
    """Await every read concurrently, then re-raise the first failure.

    Unlike a plain gather, no read is left running when another one fails.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


def _to_record(row: WorkflowTransition, changer_name: str | None = None) -> TransitionRecord:
    return TransitionRecord(
        id=row.id,
        idea_id=row.idea_id,
        from_status=row.from_status,
        to_status=row.to_status,
        reason=row.reason,
        changed_by=row.changed_by,
        created_at=row.created_at,
        changer_name=changer_name,
    )


class SqlWorkflowStore:
    """SQLAlchemy implementation of WorkflowStore."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize with an injected session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self.session_factory() as session:
                yield session
        except (SQLAlchemyError, OSError) as exc:
            raise StoreUnavailableError(f"{type(exc).__name__}: {exc}") from exc

    async def _count(self, model, idea_id: uuid.UUID) -> int:
        async with self._session() as session:
            result = await session.scalar(
                select(func.count()).select_from(model).where(model.idea_id == idea_id)
            )
            return int(result or 0)

    async def count_votes_and_comments(self, idea_id: uuid.UUID) -> VoteCommentCounts:
        async with self._session() as session:
            votes = await session.scalar(
                select(func.count()).select_from(Vote).where(Vote.idea_id == idea_id)
            )
            comments = await session.scalar(
                select(func.count()).select_from(Comment).where(Comment.idea_id == idea_id)
            )
            return VoteCommentCounts(votes=int(votes or 0), comments=int(comments or 0))

    async def count_evaluations(self, idea_id: uuid.UUID) -> int:
        return await self._count(Evaluation, idea_id)

    async def fetch_evaluation_scores(self, idea_id: uuid.UUID) -> list[EvaluationScores]:
        async with self._session() as session:
            result = await session.execute(
                select(
                    Evaluation.market_size,
                    Evaluation.feasibility,
                    Evaluation.strategic_fit,
                    Evaluation.novelty,
                ).where(Evaluation.idea_id == idea_id)
            )
            return [
                EvaluationScores(
                    market_size=row.market_size,
                    feasibility=row.feasibility,
                    strategic_fit=row.strategic_fit,
                    novelty=row.novelty,
                )
                for row in result.all()
            ]

    async def count_comments(self, idea_id: uuid.UUID) -> int:
        return await self._count(Comment, idea_id)

    async def count_investor_interest(self, idea_id: uuid.UUID) -> int:
        return await self._count(InvestorInterest, idea_id)

    async def count_documents(self, idea_id: uuid.UUID) -> int:
        return await self._count(Document, idea_id)

    async def fetch_votes(self, idea_id: uuid.UUID) -> list[bool]:
        async with self._session() as session:
            result = await session.execute(select(Vote.vote).where(Vote.idea_id == idea_id))
            return [bool(v) for v in result.scalars().all()]

    async def get_idea_status(self, idea_id: uuid.UUID) -> IdeaStatus:
        async with self._session() as session:
            status = await session.scalar(select(Idea.status).where(Idea.id == idea_id))
            if status is None:
                raise IdeaNotFoundError(idea_id)
            return IdeaStatus(status)

    async def get_profile_role(self, user_id: uuid.UUID) -> str | None:
        async with self._session() as session:
            return await session.scalar(select(Profile.role).where(Profile.id == user_id))

    async def update_idea_status_and_log_transition(
        self,
        idea_id: uuid.UUID,
        new_status: IdeaStatus,
        reason: str | None,
        acting_user_id: uuid.UUID,
        expected_status: IdeaStatus | None = None,
    ) -> TransitionRecord:
        """Set the idea's status and append the transition row in one transaction.

        The UPDATE is conditioned on the status read at the start of the
        transaction (compare-and-swap), so a concurrent change makes this call
        fail with StaleStatusError instead of silently overwriting it. When
        ``expected_status`` is given it must also match the stored status.

        Raises:
            IdeaNotFoundError: no idea with this id
            StaleStatusError: status differs from expected or changed mid-transaction
            StoreUnavailableError: driver or connection failure
        """
        async with self._session() as session:
            async with session.begin():
                current = await session.scalar(
                    select(Idea.status).where(Idea.id == idea_id).with_for_update()
                )
                if current is None:
                    raise IdeaNotFoundError(idea_id)
                if expected_status is not None and current != expected_status.value:
                    raise StaleStatusError(idea_id, expected_status.value, current)

                now = datetime.now(timezone.utc)
                result = await session.execute(
                    update(Idea)
                    .where(Idea.id == idea_id, Idea.status == current)
                    .values(status=new_status.value, updated_at=now)
                )
                if result.rowcount != 1:
                    raise StaleStatusError(idea_id, current, None)

                transition = WorkflowTransition(
                    idea_id=idea_id,
                    from_status=current,
                    to_status=new_status.value,
                    reason=reason,
                    changed_by=acting_user_id,
                    created_at=now,
                )
                session.add(transition)
                await session.flush()

            return _to_record(transition)

    async def fetch_transition_history(self, idea_id: uuid.UUID) -> list[TransitionRecord]:
        """Transitions for an idea, newest first, with the changer's profile name."""
        async with self._session() as session:
            result = await session.execute(
                select(WorkflowTransition, Profile.name)
                .outerjoin(Profile, Profile.id == WorkflowTransition.changed_by)
                .where(WorkflowTransition.idea_id == idea_id)
                .order_by(WorkflowTransition.created_at.desc())
            )
            return [_to_record(row, name) for row, name in result.all()]
