class IdeaFlowError(Exception):
    """Base exception for the IdeaFlow backend."""

    pass


class StoreUnavailableError(IdeaFlowError):
    """Raised when the persistent store cannot be reached or a query fails."""

    pass


class IdeaNotFoundError(IdeaFlowError):
    """Raised when an idea id does not resolve to a row."""

    def __init__(self, idea_id):
        self.idea_id = idea_id
        super().__init__(f"Idea {idea_id} not found")


class StaleStatusError(IdeaFlowError):
    """Raised when the idea's status changed between read and write."""

    def __init__(self, idea_id, expected: str, actual: str | None):
        self.idea_id = idea_id
        self.expected = expected
        self.actual = actual
        super().__init__(f"Idea {idea_id} status is '{actual}', expected '{expected}'")
