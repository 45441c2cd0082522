"""Re-export all models so Base.metadata sees them."""

from ideaflow.db.models.comment import Comment
from ideaflow.db.models.document import Document
from ideaflow.db.models.evaluation import Evaluation
from ideaflow.db.models.group import Group
from ideaflow.db.models.idea import Idea
from ideaflow.db.models.investor_interest import InvestorInterest
from ideaflow.db.models.profile import Profile
from ideaflow.db.models.vote import Vote
from ideaflow.db.models.workflow_transition import WorkflowTransition

__all__ = [
    "Comment",
    "Document",
    "Evaluation",
    "Group",
    "Idea",
    "InvestorInterest",
    "Profile",
    "Vote",
    "WorkflowTransition",
]
