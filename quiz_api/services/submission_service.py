"""Service layer for quiz submissions.

One ledger row is kept per (quiz, user) pair. Each submit overwrites the
latest answers and score in place and keeps the best score ever achieved.
"""
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from sqlalchemy import case, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from quiz_api.errors import PersistenceError
from quiz_api.models.db.submission import QuizSubmission
from quiz_api.services.grading import GradedQuestion, ScoreSummary, aggregate, grade_quiz
from quiz_api.services.quiz_service import get_quiz

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    """Graded attempt plus the ledger row it produced."""

    graded: list[GradedQuestion]
    summary: ScoreSummary
    highest_score: int
    is_new_high_score: bool
    submission: QuizSubmission


def _stored_answers(graded: list[GradedQuestion]) -> list[dict[str, Any]]:
    return [
        {"questionId": item.question_id, "answer": item.selected_option}
        for item in graded
    ]


def _find_submission(
    db: DBSession, quiz_id: str, user_id: str, for_update: bool = False
) -> QuizSubmission | None:
    query = select(QuizSubmission).where(
        QuizSubmission.quiz_id == quiz_id,
        QuizSubmission.user_id == user_id,
    )
    if for_update:
        query = query.with_for_update()
    return db.execute(query).scalar_one_or_none()


def _update_submission(
    db: DBSession,
    submission_id: int,
    answers: list[dict[str, Any]],
    score: int,
    total: int,
    duration: int,
) -> None:
    """Overwrite the latest attempt; the watermark is maxed inside the UPDATE."""
    db.execute(
        update(QuizSubmission)
        .where(QuizSubmission.id == submission_id)
        .values(
            answers_json=json.dumps(answers, ensure_ascii=False) if answers else None,
            score=score,
            total=total,
            duration=duration,
            submitted_at=datetime.now(timezone.utc),
            highest_score=case(
                (QuizSubmission.highest_score < score, score),
                else_=QuizSubmission.highest_score,
            ),
            attempt_count=QuizSubmission.attempt_count + 1,
        )
        .execution_options(synchronize_session=False)
    )


def _upsert_submission(
    db: DBSession,
    quiz_id: str,
    user_id: str,
    answers: list[dict[str, Any]],
    summary: ScoreSummary,
    duration: int,
) -> int:
    """
    Create or update the ledger row and commit.

    Returns the highest score recorded before this attempt.
    """
    existing = _find_submission(db, quiz_id, user_id, for_update=True)
    if existing is None:
        submission = QuizSubmission(
            quiz_id=quiz_id,
            user_id=user_id,
            score=summary.score,
            total=summary.total,
            duration=duration,
            highest_score=summary.score,
            attempt_count=1,
        )
        submission.answers = answers
        db.add(submission)
        try:
            db.commit()
            return 0
        except IntegrityError:
            # Another request created the row first; fall through to update it
            db.rollback()
            logger.info("Concurrent first submission for quiz %s user %s", quiz_id, user_id)
            existing = _find_submission(db, quiz_id, user_id, for_update=True)
            if existing is None:
                raise

    previous_best = existing.highest_score
    _update_submission(db, existing.id, answers, summary.score, summary.total, duration)
    db.commit()
    return previous_best


def submit_quiz(
    db: DBSession,
    quiz_id: str,
    user_id: str,
    answers: Iterable[Any],
    duration: int = 0,
) -> SubmissionResult:
    """
    Grade an attempt and record it in the ledger.

    Raises:
        QuizNotFoundError: the quiz does not exist.
        PersistenceError: the quiz could not be read or the ledger row could
            not be written; nothing is saved.
    """
    try:
        quiz = get_quiz(db, quiz_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to load quiz %s", quiz_id)
        raise PersistenceError(f"Could not load quiz {quiz_id}") from exc

    graded = grade_quiz(quiz, answers)
    summary = aggregate(quiz, graded)
    stored = _stored_answers(graded)

    try:
        previous_best = _upsert_submission(db, quiz_id, user_id, stored, summary, duration)
        submission = _find_submission(db, quiz_id, user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to save submission for quiz %s user %s", quiz_id, user_id)
        raise PersistenceError("Could not save submission") from exc

    if submission is None:
        raise PersistenceError("Submission row missing after save")

    # Only approximate for racing submits where the backend has no row locks;
    # the stored highest_score is exact either way
    is_new_high_score = summary.correct_count > previous_best
    logger.info(
        "User %s scored %d/%d on quiz %s (best %d)",
        user_id,
        summary.correct_count,
        summary.total,
        quiz_id,
        submission.highest_score,
    )
    if is_new_high_score:
        logger.debug("New high score for user %s on quiz %s", user_id, quiz_id)

    return SubmissionResult(
        graded=graded,
        summary=summary,
        highest_score=submission.highest_score,
        is_new_high_score=is_new_high_score,
        submission=submission,
    )


def get_submission(db: DBSession, quiz_id: str, user_id: str) -> QuizSubmission | None:
    """Get the ledger row for a (quiz, user) pair."""
    return _find_submission(db, quiz_id, user_id)


def get_submissions_by_quiz_and_user(
    db: DBSession,
    quiz_id: str,
    user_id: str,
    limit: int = 50,
) -> list[QuizSubmission]:
    """Ledger rows for the pair, newest first (at most one under update-in-place)."""
    query = (
        select(QuizSubmission)
        .where(
            QuizSubmission.quiz_id == quiz_id,
            QuizSubmission.user_id == user_id,
        )
        .order_by(QuizSubmission.submitted_at.desc())
        .limit(limit)
    )
    return list(db.execute(query).scalars().all())


def get_history(
    db: DBSession,
    quiz_id: str,
    user_id: str,
    limit: int = 50,
) -> list[QuizSubmission]:
    """
    Ledger rows for a user on an existing quiz.

    Raises:
        QuizNotFoundError: the quiz does not exist.
        PersistenceError: the store could not be read.
    """
    try:
        get_quiz(db, quiz_id)
        return get_submissions_by_quiz_and_user(db, quiz_id, user_id, limit=limit)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to read history for quiz %s user %s", quiz_id, user_id)
        raise PersistenceError(f"Could not read history for quiz {quiz_id}") from exc
