"""
Quiz submission ledger model.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from quiz_api.database import Base


class QuizSubmission(Base):
    """
    Ledger row for one (quiz, user) pair.
    Updated in place on every attempt; highest_score never decreases.
    """

    __tablename__ = "quiz_submissions"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    quiz_id: Mapped[str] = mapped_column(
        ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    # Latest attempt
    answers_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    score: Mapped[int] = mapped_column(default=0, nullable=False)
    total: Mapped[int] = mapped_column(default=0, nullable=False)
    duration: Mapped[int] = mapped_column(default=0, nullable=False)  # seconds
    submitted_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Carried across attempts
    highest_score: Mapped[int] = mapped_column(default=0, nullable=False)
    attempt_count: Mapped[int] = mapped_column(default=1, nullable=False)

    __table_args__ = (
        UniqueConstraint("quiz_id", "user_id", name="uq_submission_quiz_user"),
    )

    @property
    def answers(self) -> list[dict[str, Any]]:
        """Parse answers from JSON."""
        if not self.answers_json:
            return []
        try:
            return json.loads(self.answers_json)
        except (json.JSONDecodeError, TypeError):
            return []

    @answers.setter
    def answers(self, value: list[dict[str, Any]] | None) -> None:
        """Serialize answers to JSON."""
        self.answers_json = json.dumps(value, ensure_ascii=False) if value else None

    @property
    def percent_correct(self) -> float:
        """Calculate percentage of correct answers."""
        if self.total == 0:
            return 0.0
        return (self.score / self.total) * 100
