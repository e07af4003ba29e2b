import json
import logging
from pathlib import Path

import pytest
from fastapi import HTTPException
from sqlalchemy.orm import Session

import cli
from quiz_api.logging_setup import setup_console_logging
from quiz_api.models.db.quiz import Quiz
from quiz_api.services import quiz_service
from quiz_api.utils import json_utils, validation


def test_read_json_file(tmp_path: Path) -> None:
    payload = {"message": "привет", "count": 2}
    dumped = json.dumps(payload, ensure_ascii=False)
    assert json_utils.json_load(dumped) == payload

    path = tmp_path / "payload.json"
    path.write_text(dumped, encoding="utf-8")
    assert json_utils.read_json_file(path, {}) == payload
    assert json_utils.read_json_file(tmp_path / "missing.json", {"fallback": True}) == {"fallback": True}


def test_validate_id() -> None:
    assert validation.validate_id("quizId", " abc ") == "abc"
    with pytest.raises(HTTPException):
        validation.validate_id("quizId", "")
    with pytest.raises(HTTPException):
        validation.validate_id("quizId", "../bad")
    with pytest.raises(HTTPException):
        validation.validate_id("quizId", "x" * 65)
    assert validation.is_valid_id("quiz-1")
    assert not validation.is_valid_id("my quiz")


@pytest.fixture
def cli_db(session_factory, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(cli, "SessionLocal", session_factory)
    monkeypatch.setattr(cli, "init_db", lambda: None)
    return session_factory


def test_cli_imports_quiz(tmp_path: Path, cli_db, db: Session, quiz_payload: dict) -> None:
    path = tmp_path / "quiz.json"
    path.write_text(json.dumps(quiz_payload), encoding="utf-8")

    assert cli.main([str(path)]) == 0
    assert quiz_service.get_quiz(db, "quiz1").title == "Sample Quiz"

    # Second import conflicts unless replacing
    assert cli.main([str(path)]) == 1
    renamed = dict(quiz_payload, title="Renamed")
    path.write_text(json.dumps(renamed), encoding="utf-8")
    assert cli.main([str(path), "--replace"]) == 0
    db.expire_all()
    assert quiz_service.get_quiz(db, "quiz1").title == "Renamed"


def test_cli_rejects_invalid_file(tmp_path: Path, cli_db) -> None:
    path = tmp_path / "quiz.json"
    path.write_text(json.dumps([1, 2]), encoding="utf-8")
    assert cli.main([str(path)]) == 1

    path.write_text(json.dumps({"title": "no course"}), encoding="utf-8")
    assert cli.main([str(path)]) == 1


def test_cli_rejects_id_the_api_cannot_address(
    tmp_path: Path, cli_db, db: Session, quiz_payload: dict
) -> None:
    path = tmp_path / "quiz.json"
    path.write_text(json.dumps(dict(quiz_payload, id="my quiz")), encoding="utf-8")
    assert cli.main([str(path)]) == 1
    assert db.query(Quiz).count() == 0

    path.write_text(json.dumps(dict(quiz_payload, id=" quiz2 ")), encoding="utf-8")
    assert cli.main([str(path)]) == 0
    assert quiz_service.get_quiz(db, "quiz2").title == "Sample Quiz"


def test_setup_console_logging_accepts_level_names() -> None:
    root = logging.getLogger()
    previous = root.level
    try:
        setup_console_logging("warning")
        assert root.level == logging.WARNING
        setup_console_logging("not-a-level")
        assert root.level == logging.INFO
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    finally:
        root.setLevel(previous)
