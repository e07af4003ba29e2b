"""Quiz-related Pydantic models."""
from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from quiz_api.models.db.quiz import QuestionType

CHOICE_TYPES = (QuestionType.SINGLE, QuestionType.IMAGE)


class QuestionPayload(BaseModel):
    """Question as authored by an instructor."""

    id: str | None = Field(None, min_length=1, max_length=64)
    type: QuestionType = QuestionType.SINGLE
    text: str = Field(..., min_length=1)
    options: list[str] = Field(default_factory=list)
    slotCount: int | None = Field(None, ge=1)
    correctAnswers: list[str] = Field(..., min_length=1)
    explanation: str | None = None

    @model_validator(mode="after")
    def check_correct_answers(self) -> "QuestionPayload":
        """Enforce the correct answer shape for the question type."""
        if self.type in CHOICE_TYPES:
            if len(self.correctAnswers) != 1:
                raise ValueError(f"{self.type.value} question needs exactly one correct answer")
            if self.options and self.correctAnswers[0] not in self.options:
                raise ValueError("correct answer must be one of the options")
        elif self.type == QuestionType.MULTIPLE:
            if self.options:
                unknown = [item for item in self.correctAnswers if item not in self.options]
                if unknown:
                    raise ValueError(f"correct answers not in options: {unknown}")
        elif self.type == QuestionType.DRAGDROP:
            if self.slotCount is None:
                self.slotCount = len(self.correctAnswers)
            if self.slotCount != len(self.correctAnswers):
                raise ValueError("slotCount must equal the number of correct answers")
        return self


class QuizUpdate(BaseModel):
    """Model for replacing quiz metadata and questions."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    timeLimit: int | None = Field(None, ge=1)
    courseId: str = Field(..., min_length=1, max_length=64)
    lessonId: str | None = Field(None, max_length=64)
    order: int = Field(1, ge=0)
    questions: list[QuestionPayload] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_question_ids(self) -> "QuizUpdate":
        seen: set[str] = set()
        for question in self.questions:
            if question.id is None:
                continue
            if question.id in seen:
                raise ValueError(f"Duplicate question id: {question.id}")
            seen.add(question.id)
        return self


class QuizCreate(QuizUpdate):
    """Model for creating a new quiz."""

    id: str | None = Field(None, min_length=1, max_length=64)


class QuestionResponse(BaseModel):
    """Question as returned to clients."""

    id: str
    type: str
    text: str
    options: list[str]
    slotCount: int | None = None
    correctAnswers: list[str] | None = None
    explanation: str | None = None


class QuizResponse(BaseModel):
    """Quiz as returned to clients."""

    id: str
    title: str
    description: str | None = None
    timeLimit: int | None = None
    courseId: str
    lessonId: str | None = None
    order: int
    questionCount: int
    questions: list[QuestionResponse]
    createdAt: datetime
    updatedAt: datetime
