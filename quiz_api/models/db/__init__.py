"""Database models."""
from quiz_api.models.db.quiz import QuestionType, Quiz, QuizQuestion
from quiz_api.models.db.submission import QuizSubmission

__all__ = [
    "QuestionType",
    "Quiz",
    "QuizQuestion",
    "QuizSubmission",
]
