import copy
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import quiz_api.models.db  # noqa: F401
from quiz_api.app import app
from quiz_api.database import Base, get_db
from quiz_api.models import QuizCreate
from quiz_api.services import quiz_service


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


SAMPLE_QUIZ = {
    "id": "quiz1",
    "title": "Sample Quiz",
    "courseId": "course1",
    "lessonId": "lesson1",
    "timeLimit": 600,
    "questions": [
        {
            "id": "q1",
            "type": "single",
            "text": "Pick B",
            "options": ["A", "B", "C"],
            "correctAnswers": ["B"],
            "explanation": "B is the second letter.",
        },
        {
            "id": "q2",
            "type": "multiple",
            "text": "Pick A and D",
            "options": ["A", "B", "C", "D"],
            "correctAnswers": ["A", "D"],
        },
    ],
}


@pytest.fixture
def sample_quiz(db: Session):
    return quiz_service.create_quiz(db, QuizCreate.model_validate(SAMPLE_QUIZ))


@pytest.fixture
def quiz_payload() -> dict:
    return copy.deepcopy(SAMPLE_QUIZ)
