"""Submission-related Pydantic models."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class AnswerIn(BaseModel):
    """One submitted answer.

    ``answer`` is left untyped on purpose: its shape depends on the stored
    question type and malformed values are graded as incorrect, not rejected.
    """

    questionId: str
    answer: Any = None


class SubmitQuizRequest(BaseModel):
    """Model for submitting a quiz attempt."""

    userId: str = Field(..., min_length=1, max_length=64)
    answers: list[AnswerIn] = Field(default_factory=list)
    duration: int = Field(0, ge=0)


class GradedAnswerResponse(BaseModel):
    """Per-question grading outcome."""

    questionId: str
    question: str
    correctAnswer: str | list[str] | None = None
    selectedOption: str | list[str | None] | None = None
    correct: bool
    explanation: str | None = None


class QuizResultResponse(BaseModel):
    """Summary of a graded attempt."""

    answers: list[GradedAnswerResponse]
    score: int
    correctCount: int
    total: int
    percentage: float
    highestScore: int
    isNewHighScore: bool
    message: str


class SubmissionResponse(BaseModel):
    """Ledger row for a (quiz, user) pair."""

    quizId: str
    userId: str
    answers: list[dict[str, Any]]
    score: int
    highestScore: int
    total: int
    duration: int
    attemptCount: int
    submittedAt: datetime


class SubmitQuizResponse(BaseModel):
    """Model for quiz submission response."""

    quizResult: QuizResultResponse
    latestSubmission: SubmissionResponse
