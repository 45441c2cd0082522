"""Shared FastAPI dependencies.

Override these in tests via app.dependency_overrides.
"""

from ideaflow.core.config import get_settings
from ideaflow.db.base import get_session_factory
from ideaflow.db.workflow_store import SqlWorkflowStore, WorkflowStore
from ideaflow.domain.stages import TransitionPolicy


def get_workflow_store() -> WorkflowStore:
    """Dependency that provides the SQL-backed workflow store."""
    return SqlWorkflowStore(get_session_factory())


def get_transition_policy() -> TransitionPolicy:
    """Dependency that provides the configured transition policy."""
    return TransitionPolicy(get_settings().transition_policy)
