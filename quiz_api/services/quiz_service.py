"""Service layer for quiz definitions."""
import logging
import uuid

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session as DBSession, selectinload

from quiz_api.errors import PersistenceError, QuizConflictError, QuizNotFoundError
from quiz_api.models.db.quiz import Quiz, QuizQuestion
from quiz_api.models.db.submission import QuizSubmission
from quiz_api.models.quizzes import QuestionPayload, QuizCreate, QuizUpdate

logger = logging.getLogger(__name__)


def get_quiz(db: DBSession, quiz_id: str) -> Quiz:
    """
    Load a quiz with its questions.

    Raises:
        QuizNotFoundError: no quiz has this id.
    """
    quiz = db.execute(
        select(Quiz).options(selectinload(Quiz.questions)).where(Quiz.id == quiz_id)
    ).scalar_one_or_none()
    if quiz is None:
        raise QuizNotFoundError(quiz_id)
    return quiz


def list_quizzes(
    db: DBSession,
    course_id: str | None = None,
    lesson_id: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[Quiz]:
    """List quizzes, optionally filtered by course and lesson."""
    query = select(Quiz).options(selectinload(Quiz.questions))

    if course_id:
        query = query.where(Quiz.course_id == course_id)
    if lesson_id:
        query = query.where(Quiz.lesson_id == lesson_id)

    query = query.order_by(Quiz.order, Quiz.created_at).limit(limit).offset(offset)

    return list(db.execute(query).scalars().all())


def _build_questions(questions: list[QuestionPayload]) -> list[QuizQuestion]:
    built = []
    for index, payload in enumerate(questions):
        question = QuizQuestion(
            id=payload.id or uuid.uuid4().hex,
            position=index,
            type=payload.type.value,
            text=payload.text,
            slot_count=payload.slotCount,
            explanation=payload.explanation,
        )
        question.options = payload.options
        question.correct_answers = payload.correctAnswers
        built.append(question)
    return built


def _apply_metadata(quiz: Quiz, payload: QuizUpdate) -> None:
    quiz.title = payload.title.strip()
    quiz.description = payload.description
    quiz.time_limit = payload.timeLimit
    quiz.course_id = payload.courseId
    quiz.lesson_id = payload.lessonId or None
    quiz.order = payload.order


def create_quiz(db: DBSession, payload: QuizCreate) -> Quiz:
    """
    Create a quiz and its questions.

    Raises:
        QuizConflictError: a quiz with the requested id already exists.
    """
    quiz_id = payload.id or uuid.uuid4().hex
    if db.get(Quiz, quiz_id) is not None:
        raise QuizConflictError(quiz_id)

    quiz = Quiz(id=quiz_id)
    _apply_metadata(quiz, payload)
    quiz.questions = _build_questions(payload.questions)

    db.add(quiz)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise QuizConflictError(quiz_id) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create quiz %s", quiz_id)
        raise PersistenceError(f"Could not create quiz {quiz_id}") from exc

    logger.info("Created quiz %s with %d questions", quiz_id, len(quiz.questions))
    return get_quiz(db, quiz_id)


def update_quiz(db: DBSession, quiz_id: str, payload: QuizUpdate) -> Quiz:
    """Replace quiz metadata and its whole question list."""
    quiz = get_quiz(db, quiz_id)
    _apply_metadata(quiz, payload)

    # Flush removals first so reused question ids do not hit the unique constraint
    quiz.questions.clear()
    db.flush()
    quiz.questions = _build_questions(payload.questions)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update quiz %s", quiz_id)
        raise PersistenceError(f"Could not update quiz {quiz_id}") from exc

    logger.info("Updated quiz %s", quiz_id)
    db.refresh(quiz)
    return quiz


def delete_quiz(db: DBSession, quiz_id: str) -> bool:
    """Delete a quiz together with its questions and submissions."""
    try:
        quiz = db.get(Quiz, quiz_id)
        if not quiz:
            return False

        db.execute(delete(QuizSubmission).where(QuizSubmission.quiz_id == quiz_id))
        db.delete(quiz)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to delete quiz %s", quiz_id)
        raise PersistenceError(f"Could not delete quiz {quiz_id}") from exc
    logger.info("Deleted quiz %s", quiz_id)
    return True
