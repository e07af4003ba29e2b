"""Pydantic models."""
from quiz_api.models.quizzes import (
    QuestionPayload,
    QuestionResponse,
    QuizCreate,
    QuizResponse,
    QuizUpdate,
)
from quiz_api.models.submissions import (
    AnswerIn,
    GradedAnswerResponse,
    QuizResultResponse,
    SubmissionResponse,
    SubmitQuizRequest,
    SubmitQuizResponse,
)

__all__ = [
    "AnswerIn",
    "GradedAnswerResponse",
    "QuestionPayload",
    "QuestionResponse",
    "QuizCreate",
    "QuizResponse",
    "QuizResultResponse",
    "QuizUpdate",
    "SubmissionResponse",
    "SubmitQuizRequest",
    "SubmitQuizResponse",
]
