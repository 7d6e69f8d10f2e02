import pytest

from models import QuestionType
from question_types import get_default_structure
from structure_validation import (
    CONTENT_REQUIRED,
    UNRECOGNIZED_TYPE,
    in_grid,
    validate_structure,
)

VALID_FORMS = {
    QuestionType.VF: {"correct_answer": False},
    QuestionType.QCM_S: {
        "options": [{"text": "3", "is_correct": False}, {"text": "4", "is_correct": True}]
    },
    QuestionType.QRM: {
        "options": [
            {"text": "2", "is_correct": True},
            {"text": "3", "is_correct": True},
            {"text": "4", "is_correct": False},
        ]
    },
    QuestionType.QCM_PA: {
        "left_options": [{"text": "a", "is_correct": True}, {"text": "b", "is_correct": False}],
        "right_options": [{"text": "c", "is_correct": False}, {"text": "d", "is_correct": True}],
    },
    QuestionType.QCM_P: {
        "assertion_a": "Water boils at 100°C at sea level",
        "assertion_b": "Pressure affects the boiling point",
        "correct_option": 2,
    },
    QuestionType.QAA: {
        "pairs": [{"left": "France", "right": "Paris"}, {"left": "Mali", "right": "Bamako"}]
    },
    QuestionType.ORD: {"items": [{"text": "A", "order": 1}, {"text": "B", "order": 2}]},
    QuestionType.LAC: {
        "text_with_blanks": "The ${{cat}} sat on the ${{mat}}",
        "blanks": [
            {"position": 1, "answer": "cat", "placeholder": "cat"},
            {"position": 2, "answer": "mat", "placeholder": "mat"},
        ],
    },
    QuestionType.GRID: {
        "grid": {"rows": 2, "cols": 2},
        "rowHeaders": ["Lion", "Eagle"],
        "colHeaders": ["Mammal", "Bird"],
        "intersections": [{"row": 0, "col": 0}, {"row": 1, "col": 1}],
    },
}


def _valid(type_id: QuestionType) -> dict:
    form = get_default_structure(type_id)
    form["content"] = "Question?"
    form.update(VALID_FORMS[type_id])
    return form


@pytest.mark.parametrize("type_id", list(QuestionType))
def test_default_structure_is_never_save_ready(type_id: QuestionType) -> None:
    errors = validate_structure(type_id, get_default_structure(type_id))
    assert errors
    assert errors[0] == CONTENT_REQUIRED


@pytest.mark.parametrize("type_id", list(QuestionType))
def test_minimal_valid_form_passes(type_id: QuestionType) -> None:
    assert validate_structure(type_id, _valid(type_id)) == []


def test_unknown_type_reports_a_single_error() -> None:
    assert validate_structure("XYZ", {"content": ""}) == [UNRECOGNIZED_TYPE]


def test_blank_content_is_whitespace_insensitive() -> None:
    form = _valid(QuestionType.VF)
    form["content"] = "   "
    assert validate_structure(QuestionType.VF, form) == [CONTENT_REQUIRED]


def test_true_false_untouched() -> None:
    form = get_default_structure(QuestionType.VF)
    assert validate_structure(QuestionType.VF, form) == [
        "question content is required",
        "select whether true or false",
    ]


def test_single_choice_allows_several_correct_options() -> None:
    form = _valid(QuestionType.QCM_S)
    for option in form["options"]:
        option["is_correct"] = True
    assert validate_structure(QuestionType.QCM_S, form) == []


def test_choice_needs_two_options_and_a_correct_one() -> None:
    form = _valid(QuestionType.QRM)
    form["options"] = [{"text": "only", "is_correct": False}]
    assert validate_structure(QuestionType.QRM, form) == [
        "at least 2 options are required for a multiple choice question",
        "at least one option must be marked correct",
    ]


def test_activity_reports_each_column() -> None:
    form = _valid(QuestionType.QCM_PA)
    form["left_options"] = [{"text": "a", "is_correct": False}]
    form["right_options"][1]["is_correct"] = False
    assert validate_structure(QuestionType.QCM_PA, form) == [
        "at least 2 options are required in the left column",
        "at least one option must be marked correct in the left column",
        "at least one option must be marked correct in the right column",
    ]


@pytest.mark.parametrize("option", [None, 0, 6, True, "2"])
def test_assertions_need_a_relation_between_one_and_five(option: object) -> None:
    form = _valid(QuestionType.QCM_P)
    form["correct_option"] = option
    assert validate_structure(QuestionType.QCM_P, form) == [
        "select the correct relation between the assertions"
    ]


def test_matching_flags_incomplete_pairs() -> None:
    form = _valid(QuestionType.QAA)
    form["pairs"][1]["right"] = " "
    assert validate_structure(QuestionType.QAA, form) == ["pair 2 is incomplete"]


def test_ordering_flags_empty_items() -> None:
    form = _valid(QuestionType.ORD)
    form["items"] = [{"text": "A", "order": 1}]
    assert validate_structure(QuestionType.ORD, form) == ["at least 2 items are required for ordering"]
    form["items"] = [{"text": "A", "order": 1}, {"text": "", "order": 2}]
    assert validate_structure(QuestionType.ORD, form) == ["item 2 is empty"]


def test_blanks_must_match_the_text() -> None:
    form = _valid(QuestionType.LAC)
    form["text_with_blanks"] = "Only ${{cat}} now"
    assert validate_structure(QuestionType.LAC, form) == [
        "blanks do not match the placeholders in the text"
    ]


def test_blanks_need_answers() -> None:
    form = _valid(QuestionType.LAC)
    form["blanks"][0]["answer"] = ""
    assert validate_structure(QuestionType.LAC, form) == ["blank 1 has no answer"]


def test_grid_with_a_single_column_header() -> None:
    form = _valid(QuestionType.GRID)
    form["grid"] = {"rows": 3, "cols": 3}
    form["colHeaders"] = ["Mammal"]
    form["intersections"] = [{"row": 0, "col": 0}]
    assert validate_structure(QuestionType.GRID, form) == [
        "at least 2 column headers are required for the grid"
    ]


def test_grid_rejects_out_of_range_intersections() -> None:
    form = _valid(QuestionType.GRID)
    form["intersections"] = [{"row": 0, "col": 0}, {"row": 2, "col": 0}, {"row": 0, "col": -1}]
    assert validate_structure(QuestionType.GRID, form) == [
        "intersection 2 is outside the grid",
        "intersection 3 is outside the grid",
    ]


def test_in_grid() -> None:
    assert in_grid(0, 0, 1, 1)
    assert not in_grid(1, 0, 1, 1)
    assert not in_grid(True, 0, 2, 2)
    assert not in_grid("0", 0, 2, 2)
    assert not in_grid(0, 0, None, 2)
