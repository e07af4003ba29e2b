"""Quiz definition and submission endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session as DbSession

from quiz_api.config import HISTORY_LIMIT, QUIZ_LIST_LIMIT
from quiz_api.database import get_db
from quiz_api.errors import PersistenceError, QuizConflictError, QuizNotFoundError
from quiz_api.models import (
    GradedAnswerResponse,
    QuestionResponse,
    QuizCreate,
    QuizResponse,
    QuizResultResponse,
    QuizUpdate,
    SubmissionResponse,
    SubmitQuizRequest,
    SubmitQuizResponse,
)
from quiz_api.models.db.quiz import Quiz, QuizQuestion
from quiz_api.models.db.submission import QuizSubmission
from quiz_api.services import quiz_service, submission_service
from quiz_api.services.submission_service import SubmissionResult
from quiz_api.utils import validate_id

router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])

RETRY_MESSAGE = "Could not save submission, please try again"


def _question_response(question: QuizQuestion, include_answers: bool) -> QuestionResponse:
    return QuestionResponse(
        id=question.id,
        type=question.type,
        text=question.text,
        options=question.options,
        slotCount=question.slot_count,
        correctAnswers=question.correct_answers if include_answers else None,
        explanation=question.explanation if include_answers else None,
    )


def _quiz_response(quiz: Quiz, include_answers: bool = False) -> QuizResponse:
    """Convert Quiz to response model."""
    return QuizResponse(
        id=quiz.id,
        title=quiz.title,
        description=quiz.description,
        timeLimit=quiz.time_limit,
        courseId=quiz.course_id,
        lessonId=quiz.lesson_id,
        order=quiz.order,
        questionCount=quiz.question_count,
        questions=[_question_response(q, include_answers) for q in quiz.questions],
        createdAt=quiz.created_at,
        updatedAt=quiz.updated_at,
    )


def _submission_response(submission: QuizSubmission) -> SubmissionResponse:
    return SubmissionResponse(
        quizId=submission.quiz_id,
        userId=submission.user_id,
        answers=submission.answers,
        score=submission.score,
        highestScore=submission.highest_score,
        total=submission.total,
        duration=submission.duration,
        attemptCount=submission.attempt_count,
        submittedAt=submission.submitted_at,
    )


def _result_response(result: SubmissionResult) -> SubmitQuizResponse:
    summary = result.summary
    quiz_result = QuizResultResponse(
        answers=[
            GradedAnswerResponse(
                questionId=item.question_id,
                question=item.question,
                correctAnswer=item.correct_answer,
                selectedOption=item.selected_option,
                correct=item.correct,
                explanation=item.explanation,
            )
            for item in result.graded
        ],
        score=summary.score,
        correctCount=summary.correct_count,
        total=summary.total,
        percentage=summary.percentage,
        highestScore=result.highest_score,
        isNewHighScore=result.is_new_high_score,
        message=summary.message,
    )
    return SubmitQuizResponse(
        quizResult=quiz_result,
        latestSubmission=_submission_response(result.submission),
    )


@router.get("", response_model=list[QuizResponse])
def list_quizzes(
    db: Annotated[DbSession, Depends(get_db)],
    course_id: str | None = Query(None, alias="courseId"),
    lesson_id: str | None = Query(None, alias="lessonId"),
    limit: int = Query(QUIZ_LIST_LIMIT, ge=1, le=1000),
    offset: int = Query(0, ge=0),
) -> list[QuizResponse]:
    """List quizzes, optionally filtered by course or lesson."""
    quizzes = quiz_service.list_quizzes(
        db, course_id=course_id, lesson_id=lesson_id, limit=limit, offset=offset
    )
    return [_quiz_response(quiz) for quiz in quizzes]


@router.post("", response_model=QuizResponse, status_code=201)
def create_quiz(
    payload: QuizCreate,
    db: Annotated[DbSession, Depends(get_db)],
) -> QuizResponse:
    """Create a new quiz."""
    if payload.id is not None:
        payload.id = validate_id("quizId", payload.id)
    try:
        quiz = quiz_service.create_quiz(db, payload)
    except QuizConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return _quiz_response(quiz, include_answers=True)


@router.get("/{quiz_id}", response_model=QuizResponse)
def get_quiz(
    quiz_id: str,
    db: Annotated[DbSession, Depends(get_db)],
    include_answers: bool = Query(False, alias="includeAnswers"),
) -> QuizResponse:
    """Get a quiz; correct answers are hidden unless requested."""
    quiz_id = validate_id("quizId", quiz_id)
    try:
        quiz = quiz_service.get_quiz(db, quiz_id)
    except QuizNotFoundError:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return _quiz_response(quiz, include_answers=include_answers)


@router.put("/{quiz_id}", response_model=QuizResponse)
def update_quiz(
    quiz_id: str,
    payload: QuizUpdate,
    db: Annotated[DbSession, Depends(get_db)],
) -> QuizResponse:
    """Replace quiz metadata and questions."""
    quiz_id = validate_id("quizId", quiz_id)
    try:
        quiz = quiz_service.update_quiz(db, quiz_id, payload)
    except QuizNotFoundError:
        raise HTTPException(status_code=404, detail="Quiz not found")
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return _quiz_response(quiz, include_answers=True)


@router.delete("/{quiz_id}", status_code=204)
def delete_quiz(
    quiz_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> Response:
    """Delete a quiz and its submissions."""
    quiz_id = validate_id("quizId", quiz_id)
    try:
        deleted = quiz_service.delete_quiz(db, quiz_id)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return Response(status_code=204)


@router.post("/{quiz_id}/submit", response_model=SubmitQuizResponse)
def submit_quiz(
    quiz_id: str,
    payload: SubmitQuizRequest,
    db: Annotated[DbSession, Depends(get_db)],
) -> SubmitQuizResponse:
    """Grade a quiz attempt and record it."""
    quiz_id = validate_id("quizId", quiz_id)
    user_id = validate_id("userId", payload.userId)
    try:
        result = submission_service.submit_quiz(
            db, quiz_id, user_id, payload.answers, payload.duration
        )
    except QuizNotFoundError:
        raise HTTPException(status_code=404, detail="Quiz not found")
    except PersistenceError:
        raise HTTPException(status_code=503, detail=RETRY_MESSAGE)
    return _result_response(result)


@router.get("/{quiz_id}/history", response_model=list[SubmissionResponse])
def get_history(
    quiz_id: str,
    db: Annotated[DbSession, Depends(get_db)],
    user_id: str = Query(..., alias="userId"),
) -> list[SubmissionResponse]:
    """Get the submission ledger for a user on a quiz."""
    quiz_id = validate_id("quizId", quiz_id)
    user_id = validate_id("userId", user_id)
    try:
        rows = submission_service.get_history(db, quiz_id, user_id, limit=HISTORY_LIMIT)
    except QuizNotFoundError:
        raise HTTPException(status_code=404, detail="Quiz not found")
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return [_submission_response(row) for row in rows]
