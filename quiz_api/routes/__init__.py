"""API route modules."""
from quiz_api.routes import quizzes

__all__ = ["quizzes"]
