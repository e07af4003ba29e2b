import argparse
import logging
from pathlib import Path

from pydantic import ValidationError

from quiz_api.config import LOG_LEVEL
from quiz_api.database import SessionLocal, init_db
from quiz_api.errors import QuizConflictError
from quiz_api.logging_setup import setup_console_logging
from quiz_api.models import QuizCreate
from quiz_api.services import quiz_service
from quiz_api.utils import is_valid_id, read_json_file

setup_console_logging(LOG_LEVEL)
logger = logging.getLogger("cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import a quiz definition from JSON")
    parser.add_argument("file", type=Path, help="Path to quiz .json file")
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Replace an existing quiz with the same id",
    )
    return parser.parse_args(argv)


def import_quiz(path: Path, replace: bool = False) -> str:
    """Validate and store a quiz definition; returns the quiz id."""
    raw = read_json_file(path, None)
    if not isinstance(raw, dict):
        raise ValueError(f"{path} does not contain a quiz object")
    payload = QuizCreate.model_validate(raw)
    if payload.id is not None:
        payload.id = payload.id.strip()
        # Same rule the HTTP routes apply to path ids
        if not is_valid_id(payload.id):
            raise ValueError(f"Invalid quiz id: {payload.id!r}")

    init_db()
    db = SessionLocal()
    try:
        try:
            quiz = quiz_service.create_quiz(db, payload)
        except QuizConflictError:
            if not replace or payload.id is None:
                raise
            quiz = quiz_service.update_quiz(db, payload.id, payload)
        return quiz.id
    finally:
        db.close()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        quiz_id = import_quiz(args.file, replace=args.replace)
    except (ValueError, ValidationError, QuizConflictError) as exc:
        logger.error("Import failed: %s", exc)
        return 1

    print(f"Saved quiz {quiz_id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
