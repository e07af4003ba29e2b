import pytest

from quiz_api.models.db.quiz import QuestionType, Quiz, QuizQuestion
from quiz_api.services import grading


def make_question(
    question_id: str,
    question_type: str,
    correct: list[str],
    options: list[str] | None = None,
    slot_count: int | None = None,
    explanation: str | None = None,
) -> QuizQuestion:
    question = QuizQuestion(
        id=question_id,
        type=question_type,
        text=f"Question {question_id}",
        slot_count=slot_count,
        explanation=explanation,
    )
    question.options = options if options is not None else list(correct)
    question.correct_answers = correct
    return question


def make_quiz(*questions: QuizQuestion) -> Quiz:
    return Quiz(id="quiz", title="Quiz", course_id="course", questions=list(questions))


@pytest.mark.parametrize("question_type", ["single", "image"])
def test_choice_exact_match(question_type: str) -> None:
    question = make_question("q1", question_type, ["B"], options=["A", "B", "C"])
    assert grading.grade_question(question, "B").correct
    assert not grading.grade_question(question, "A").correct
    assert not grading.grade_question(question, "b").correct
    assert not grading.grade_question(question, None).correct


def test_choice_normalizes_missing_to_empty_string() -> None:
    assert grading.normalize_answer(QuestionType.SINGLE, None) == grading.ChoiceAnswer("")
    assert grading.normalize_answer(QuestionType.IMAGE, ["B"]) == grading.ChoiceAnswer("")
    assert grading.normalize_answer(QuestionType.SINGLE, 3) == grading.ChoiceAnswer("")


def test_multiple_requires_exact_set() -> None:
    question = make_question("q1", "multiple", ["A", "C"], options=["A", "B", "C"])
    assert not grading.grade_question(question, ["A", "B", "C"]).correct
    assert not grading.grade_question(question, ["A"]).correct
    assert grading.grade_question(question, ["A", "C"]).correct
    assert grading.grade_question(question, ["C", "A"]).correct


def test_multiple_compares_as_sets() -> None:
    question = make_question("q1", "multiple", ["A", "C"], options=["A", "B", "C"])
    assert grading.grade_question(question, ["A", "A", "C"]).correct
    assert not grading.grade_question(question, ["A", "A"]).correct


def test_multiple_normalization_degrades() -> None:
    assert grading.normalize_answer(QuestionType.MULTIPLE, None) == grading.MultipleAnswer(frozenset())
    assert grading.normalize_answer(QuestionType.MULTIPLE, "A") == grading.MultipleAnswer(frozenset({"A"}))
    assert grading.normalize_answer(QuestionType.MULTIPLE, ["A", 1, None]) == grading.MultipleAnswer(
        frozenset({"A"})
    )
    assert grading.normalize_answer(QuestionType.MULTIPLE, {"A": True}) == grading.MultipleAnswer(
        frozenset()
    )


def test_single_element_multiple_accepts_bare_string() -> None:
    question = make_question("q1", "multiple", ["A"], options=["A", "B"])
    assert grading.grade_question(question, "A").correct


def test_dragdrop_is_positional() -> None:
    question = make_question("q1", "dragdrop", ["X", "Y", "Z"], slot_count=3)
    assert not grading.grade_question(question, ["X", "Y", None]).correct
    assert grading.grade_question(question, ["X", "Y", "Z"]).correct
    assert not grading.grade_question(question, ["Y", "X", "Z"]).correct


def test_dragdrop_trims_but_does_not_fold_case() -> None:
    question = make_question("q1", "dragdrop", ["X", "Y", "Z"], slot_count=3)
    assert not grading.grade_question(question, ["x", "Y", "Z"]).correct
    assert grading.grade_question(question, [" X ", "Y", "Z\n"]).correct


def test_dragdrop_compares_numbers_as_text() -> None:
    question = make_question("q1", "dragdrop", ["1", "2"], slot_count=2)
    graded = grading.grade_question(question, [1, 2])
    assert graded.correct
    assert graded.selected_option == ["1", "2"]

    answer = grading.normalize_answer(QuestionType.DRAGDROP, [None, {"x": 1}, True], slot_count=3)
    assert answer == grading.DragDropAnswer((None, None, None))


def test_dragdrop_pads_missing_slots() -> None:
    answer = grading.normalize_answer(QuestionType.DRAGDROP, ["X"], slot_count=3)
    assert answer == grading.DragDropAnswer(("X", None, None))

    answer = grading.normalize_answer(QuestionType.DRAGDROP, "X", slot_count=2)
    assert answer == grading.DragDropAnswer((None, None))

    question = make_question("q1", "dragdrop", ["X", "Y"], slot_count=2)
    graded = grading.grade_question(question, ["X"])
    assert not graded.correct
    assert graded.selected_option == ["X", None]


def test_dragdrop_extra_slots_are_wrong() -> None:
    question = make_question("q1", "dragdrop", ["X", "Y"], slot_count=2)
    assert not grading.grade_question(question, ["X", "Y", "Z"]).correct


def test_unknown_type_is_incorrect() -> None:
    question = make_question("q1", "essay", ["anything"])
    assert grading.resolve_type("essay") is None
    assert grading.normalize_answer(None, "anything") is None

    graded = grading.grade_question(question, "anything")
    assert not graded.correct
    assert graded.selected_option is None


def test_graded_question_carries_review_fields() -> None:
    question = make_question("q1", "single", ["B"], options=["A", "B"], explanation="Because.")
    graded = grading.grade_question(question, "A")
    assert graded.question_id == "q1"
    assert graded.question == "Question q1"
    assert graded.correct_answer == "B"
    assert graded.selected_option == "A"
    assert graded.explanation == "Because."

    multi = make_question("q2", "multiple", ["A", "B"])
    assert grading.grade_question(multi, ["B", "A"]).correct_answer == ["A", "B"]


def test_type_comes_from_quiz_not_payload() -> None:
    question = make_question("q1", "multiple", ["A", "B"], options=["A", "B", "C"])
    quiz = make_quiz(question)
    graded = grading.grade_quiz(quiz, [{"questionId": "q1", "type": "single", "answer": "A"}])
    assert not graded[0].correct


def test_grade_quiz_handles_missing_and_unknown_answers() -> None:
    quiz = make_quiz(
        make_question("q1", "single", ["A"]),
        make_question("q2", "single", ["B"]),
        make_question("q3", "multiple", ["C", "D"]),
    )
    answers = [
        {"questionId": "q1", "answer": "A"},
        {"questionId": "ghost", "answer": "A"},
    ]
    graded = grading.grade_quiz(quiz, answers)

    assert [item.question_id for item in graded] == ["q1", "q2", "q3"]
    assert [item.correct for item in graded] == [True, False, False]

    summary = grading.aggregate(quiz, graded)
    assert summary.total == 3
    assert summary.score == summary.correct_count == 1


def test_later_duplicate_answer_wins() -> None:
    quiz = make_quiz(make_question("q1", "single", ["A"]))
    answers = [
        {"questionId": "q1", "answer": "B"},
        {"questionId": "q1", "answer": "A"},
    ]
    assert grading.grade_quiz(quiz, answers)[0].correct


def test_grading_is_deterministic() -> None:
    quiz = make_quiz(
        make_question("q1", "single", ["A"]),
        make_question("q2", "dragdrop", ["X", "Y"], slot_count=2),
    )
    answers = [{"questionId": "q1", "answer": "A"}, {"questionId": "q2", "answer": ["X", "Y"]}]
    first = grading.aggregate(quiz, grading.grade_quiz(quiz, answers))
    second = grading.aggregate(quiz, grading.grade_quiz(quiz, answers))
    assert first == second
    assert first.score == 2


def test_empty_quiz_scores_zero() -> None:
    quiz = make_quiz()
    summary = grading.aggregate(quiz, grading.grade_quiz(quiz, []))
    assert summary.score == 0
    assert summary.total == 0
    assert summary.percentage == 0.0
    assert summary.message == "You scored 0/0"


def test_percentage() -> None:
    assert grading.percentage(3, 4) == 75.0
    assert grading.percentage(0, 0) == 0.0
