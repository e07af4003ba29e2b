"""Domain errors raised by the service layer.

Routes translate these into HTTP responses; services never raise
``HTTPException`` themselves.
"""


class QuizNotFoundError(LookupError):
    """Quiz does not exist for the given id."""

    def __init__(self, quiz_id: str):
        super().__init__(f"Quiz not found: {quiz_id}")
        self.quiz_id = quiz_id


class QuizConflictError(ValueError):
    """A quiz with the same id already exists."""

    def __init__(self, quiz_id: str):
        super().__init__(f"Quiz already exists: {quiz_id}")
        self.quiz_id = quiz_id


class PersistenceError(RuntimeError):
    """Underlying store failed to read or write."""
