"""Answer normalization, per-question grading and score aggregation.

Everything here is pure computation over already loaded data. The question
type always comes from the stored question, never from the submitted payload,
and malformed answers degrade to "unanswered" instead of raising.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from quiz_api.models.db.quiz import QuestionType, Quiz, QuizQuestion


@dataclass(frozen=True)
class ChoiceAnswer:
    """Answer to a ``single`` or ``image`` question."""

    value: str

    def to_json(self) -> str:
        return self.value


@dataclass(frozen=True)
class MultipleAnswer:
    """Answer to a ``multiple`` question; compared as a set."""

    values: frozenset[str]

    def to_json(self) -> list[str]:
        return sorted(self.values)


@dataclass(frozen=True)
class DragDropAnswer:
    """Answer to a ``dragdrop`` question; compared slot by slot."""

    slots: tuple[str | None, ...]

    def to_json(self) -> list[str | None]:
        return list(self.slots)


NormalizedAnswer = ChoiceAnswer | MultipleAnswer | DragDropAnswer


@dataclass(frozen=True)
class GradedQuestion:
    """Outcome of grading one question."""

    question_id: str
    question: str
    correct: bool
    correct_answer: str | list[str] | None
    selected_option: str | list[str | None] | None
    explanation: str | None = None


@dataclass(frozen=True)
class ScoreSummary:
    """Aggregated score for a graded attempt."""

    correct_count: int
    total: int

    @property
    def score(self) -> int:
        return self.correct_count

    @property
    def percentage(self) -> float:
        return percentage(self.correct_count, self.total)

    @property
    def message(self) -> str:
        return f"You scored {self.correct_count}/{self.total}"


def resolve_type(raw_type: str | None) -> QuestionType | None:
    """Map a stored type tag to a QuestionType, or None when unsupported."""
    try:
        return QuestionType(raw_type)
    except ValueError:
        return None


def _slot_value(item: Any) -> str | None:
    # Numbers compare by their text form
    if isinstance(item, str):
        return item.strip()
    if isinstance(item, (int, float)) and not isinstance(item, bool):
        return str(item).strip()
    return None


def normalize_answer(
    question_type: QuestionType | None,
    raw: Any,
    slot_count: int = 0,
) -> NormalizedAnswer | None:
    """
    Convert a raw submitted value into the comparable form for its type.

    Never raises: missing or malformed input becomes an empty answer.
    Returns None for unsupported question types.
    """
    if question_type in (QuestionType.SINGLE, QuestionType.IMAGE):
        return ChoiceAnswer(raw if isinstance(raw, str) else "")

    if question_type == QuestionType.MULTIPLE:
        if isinstance(raw, str):
            return MultipleAnswer(frozenset([raw]) if raw else frozenset())
        if isinstance(raw, (list, tuple)):
            return MultipleAnswer(frozenset(item for item in raw if isinstance(item, str)))
        return MultipleAnswer(frozenset())

    if question_type == QuestionType.DRAGDROP:
        slots: list[str | None] = []
        if isinstance(raw, (list, tuple)):
            slots = [_slot_value(item) for item in raw]
        if len(slots) < slot_count:
            slots.extend([None] * (slot_count - len(slots)))
        return DragDropAnswer(tuple(slots))

    return None


def _grade_choice(question: QuizQuestion, answer: ChoiceAnswer) -> bool:
    correct = question.correct_answers
    return len(correct) == 1 and answer.value == correct[0]


def _grade_multiple(question: QuizQuestion, answer: MultipleAnswer) -> bool:
    correct = frozenset(question.correct_answers)
    return bool(correct) and answer.values == correct


def _grade_dragdrop(question: QuizQuestion, answer: DragDropAnswer) -> bool:
    correct = [str(item).strip() for item in question.correct_answers]
    if not correct or len(answer.slots) != len(correct):
        return False
    return all(
        slot is not None and slot == expected
        for slot, expected in zip(answer.slots, correct)
    )


_GRADERS: dict[QuestionType, Callable[[QuizQuestion, Any], bool]] = {
    QuestionType.SINGLE: _grade_choice,
    QuestionType.IMAGE: _grade_choice,
    QuestionType.MULTIPLE: _grade_multiple,
    QuestionType.DRAGDROP: _grade_dragdrop,
}


def is_correct(question: QuizQuestion, answer: NormalizedAnswer | None) -> bool:
    """Binary verdict for a normalized answer; unsupported types are wrong."""
    question_type = resolve_type(question.type)
    if question_type is None or answer is None:
        return False
    return _GRADERS[question_type](question, answer)


def _correct_answer_value(
    question_type: QuestionType | None, question: QuizQuestion
) -> str | list[str] | None:
    correct = question.correct_answers
    if question_type in (QuestionType.SINGLE, QuestionType.IMAGE):
        return correct[0] if correct else None
    return list(correct)


def grade_question(question: QuizQuestion, raw_answer: Any) -> GradedQuestion:
    """Normalize and grade a single question."""
    question_type = resolve_type(question.type)
    answer = normalize_answer(question_type, raw_answer, question.expected_slots)
    return GradedQuestion(
        question_id=question.id,
        question=question.text,
        correct=is_correct(question, answer),
        correct_answer=_correct_answer_value(question_type, question),
        selected_option=answer.to_json() if answer is not None else None,
        explanation=question.explanation,
    )


def index_answers(answers: Iterable[Any]) -> dict[str, Any]:
    """Key submitted answers by question id; later entries win."""
    indexed: dict[str, Any] = {}
    for item in answers:
        question_id = getattr(item, "questionId", None)
        raw = getattr(item, "answer", None)
        if isinstance(item, dict):
            question_id = item.get("questionId")
            raw = item.get("answer")
        if isinstance(question_id, str):
            indexed[question_id] = raw
    return indexed


def grade_quiz(quiz: Quiz, answers: Iterable[Any]) -> list[GradedQuestion]:
    """
    Grade every question of the quiz.

    Iteration follows the quiz's question list: missing answers are graded
    as unanswered and answers for unknown question ids are ignored.
    """
    by_id = index_answers(answers)
    return [grade_question(question, by_id.get(question.id)) for question in quiz.questions]


def aggregate(quiz: Quiz, graded: list[GradedQuestion]) -> ScoreSummary:
    """Sum correctness; total is the quiz's current question count."""
    correct_count = sum(1 for item in graded if item.correct)
    return ScoreSummary(correct_count=correct_count, total=len(quiz.questions))


def percentage(correct_count: int, total: int) -> float:
    """Percentage of correct answers; 0.0 for an empty quiz."""
    if total <= 0:
        return 0.0
    return (correct_count / total) * 100
