"""
Quiz and QuizQuestion database models.
"""

from __future__ import annotations

import enum
import json
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quiz_api.database import Base


class QuestionType(str, enum.Enum):
    """Supported question types."""

    SINGLE = "single"
    MULTIPLE = "multiple"
    IMAGE = "image"  # single choice where options are image URLs
    DRAGDROP = "dragdrop"


class Quiz(Base):
    """
    Quiz definition.
    Owned by a course and optionally a lesson; holds an ordered question list.
    """

    __tablename__ = "quizzes"

    # Primary key - caller supplied or generated uuid hex
    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    time_limit: Mapped[int | None] = mapped_column(nullable=True)  # seconds

    # Ownership
    course_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    lesson_id: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    order: Mapped[int] = mapped_column(default=1, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    questions: Mapped[list["QuizQuestion"]] = relationship(
        "QuizQuestion",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuizQuestion.position",
    )

    @property
    def question_count(self) -> int:
        return len(self.questions)


class QuizQuestion(Base):
    """
    Single question within a quiz.
    Options and correct answers are stored as JSON text.
    """

    __tablename__ = "quiz_questions"

    pk: Mapped[int] = mapped_column(primary_key=True, index=True)
    quiz_id: Mapped[str] = mapped_column(
        ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Question id is unique within its quiz only
    id: Mapped[str] = mapped_column(String(64), nullable=False)
    position: Mapped[int] = mapped_column(default=0, nullable=False)

    # Kept as plain string so rows with an unrecognised type still load
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    slot_count: Mapped[int | None] = mapped_column(nullable=True)
    explanation: Mapped[str | None] = mapped_column(Text, nullable=True)

    options_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    correct_answers_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("quiz_id", "id", name="uq_quiz_question_id"),
    )

    quiz: Mapped["Quiz"] = relationship("Quiz", back_populates="questions")

    @property
    def options(self) -> list[str]:
        """Parse options from JSON."""
        return _load_string_list(self.options_json)

    @options.setter
    def options(self, value: list[str] | None) -> None:
        """Serialize options to JSON."""
        self.options_json = json.dumps(value, ensure_ascii=False) if value else None

    @property
    def correct_answers(self) -> list[str]:
        """Parse correct answers from JSON."""
        return _load_string_list(self.correct_answers_json)

    @correct_answers.setter
    def correct_answers(self, value: list[str] | None) -> None:
        """Serialize correct answers to JSON."""
        self.correct_answers_json = json.dumps(value, ensure_ascii=False) if value else None

    @property
    def expected_slots(self) -> int:
        """Number of dragdrop slots; falls back to the correct answer count."""
        if self.slot_count:
            return self.slot_count
        return len(self.correct_answers)


def _load_string_list(raw: str | None) -> list[Any]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return []
    return value if isinstance(value, list) else []
