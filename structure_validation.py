"""Per-type validation of question form data."""
from __future__ import annotations

from typing import Any, Callable, Mapping

from errors import UnknownTypeError
from models import QuestionType
from question_types import grid_dimensions, resolve_type, scan_placeholders

RELATION_OPTIONS = range(1, 6)

CONTENT_REQUIRED = "question content is required"
UNRECOGNIZED_TYPE = "unrecognized question type"


def _text(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


def _records(form_data: Mapping[str, Any], key: str) -> list[dict[str, Any]]:
    value = form_data.get(key)
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, dict) else {} for item in value]


def _has_correct(options: list[dict[str, Any]]) -> bool:
    return any(bool(option.get("is_correct")) for option in options)


def _validate_true_false(data: Mapping[str, Any]) -> list[str]:
    if not isinstance(data.get("correct_answer"), bool):
        return ["select whether true or false"]
    return []


def _validate_choice(label: str) -> Callable[[Mapping[str, Any]], list[str]]:
    def validate(data: Mapping[str, Any]) -> list[str]:
        errors = []
        options = _records(data, "options")
        if len(options) < 2:
            errors.append(f"at least 2 options are required for a {label} question")
        if not _has_correct(options):
            errors.append("at least one option must be marked correct")
        return errors

    return validate


def _validate_activity(data: Mapping[str, Any]) -> list[str]:
    errors = []
    columns = (("left", _records(data, "left_options")), ("right", _records(data, "right_options")))
    for side, options in columns:
        if len(options) < 2:
            errors.append(f"at least 2 options are required in the {side} column")
    for side, options in columns:
        if not _has_correct(options):
            errors.append(f"at least one option must be marked correct in the {side} column")
    return errors


def _validate_assertions(data: Mapping[str, Any]) -> list[str]:
    errors = []
    if not _text(data.get("assertion_a")):
        errors.append("assertion A is required")
    if not _text(data.get("assertion_b")):
        errors.append("assertion B is required")
    option = data.get("correct_option")
    if isinstance(option, bool) or not isinstance(option, int) or option not in RELATION_OPTIONS:
        errors.append("select the correct relation between the assertions")
    return errors


def _validate_matching(data: Mapping[str, Any]) -> list[str]:
    errors = []
    pairs = _records(data, "pairs")
    if len(pairs) < 2:
        errors.append("at least 2 pairs are required")
    for index, pair in enumerate(pairs, start=1):
        if not _text(pair.get("left")) or not _text(pair.get("right")):
            errors.append(f"pair {index} is incomplete")
    return errors


def _validate_ordering(data: Mapping[str, Any]) -> list[str]:
    errors = []
    items = _records(data, "items")
    if len(items) < 2:
        errors.append("at least 2 items are required for ordering")
    for index, item in enumerate(items, start=1):
        if not _text(item.get("text")):
            errors.append(f"item {index} is empty")
    return errors


def _validate_blanks(data: Mapping[str, Any]) -> list[str]:
    errors = []
    text = data.get("text_with_blanks")
    if not _text(text):
        errors.append("text with blanks is required")
    blanks = _records(data, "blanks")
    if not blanks:
        errors.append("at least one blank is required")
    placeholders = scan_placeholders(text)
    recorded = [blank.get("placeholder") for blank in blanks]
    if blanks and recorded != placeholders:
        errors.append("blanks do not match the placeholders in the text")
    for index, blank in enumerate(blanks, start=1):
        if not _text(blank.get("answer")):
            errors.append(f"blank {index} has no answer")
    return errors


def _validate_grid(data: Mapping[str, Any]) -> list[str]:
    errors = []
    for key, label in (("rowHeaders", "row"), ("colHeaders", "column")):
        headers = data.get(key)
        filled = [h for h in headers if _text(h)] if isinstance(headers, list) else []
        if len(filled) < 2:
            errors.append(f"at least 2 {label} headers are required for the grid")
    intersections = _records(data, "intersections")
    if not intersections:
        errors.append("at least one intersection must be selected")
    rows, cols = grid_dimensions(data)
    for index, cell in enumerate(intersections, start=1):
        if not in_grid(cell.get("row"), cell.get("col"), rows, cols):
            errors.append(f"intersection {index} is outside the grid")
    return errors


def in_grid(row: object, col: object, rows: object, cols: object) -> bool:
    for value, limit in ((row, rows), (col, cols)):
        if isinstance(value, bool) or not isinstance(value, int):
            return False
        if isinstance(limit, bool) or not isinstance(limit, int):
            return False
        if not 0 <= value < limit:
            return False
    return True


_VALIDATORS: dict[QuestionType, Callable[[Mapping[str, Any]], list[str]]] = {
    QuestionType.VF: _validate_true_false,
    QuestionType.QCM_S: _validate_choice("single choice"),
    QuestionType.QRM: _validate_choice("multiple choice"),
    QuestionType.QCM_PA: _validate_activity,
    QuestionType.QCM_P: _validate_assertions,
    QuestionType.QAA: _validate_matching,
    QuestionType.ORD: _validate_ordering,
    QuestionType.LAC: _validate_blanks,
    QuestionType.GRID: _validate_grid,
}


def validate_structure(type_id: object, form_data: Mapping[str, Any] | None) -> list[str]:
    """Return every rule violation of ``form_data``; an empty list means save-ready."""
    try:
        question_type = resolve_type(type_id)
    except UnknownTypeError:
        return [UNRECOGNIZED_TYPE]

    data = form_data if isinstance(form_data, Mapping) else {}
    errors = []
    if not _text(data.get("content")):
        errors.append(CONTENT_REQUIRED)
    errors.extend(_VALIDATORS[question_type](data))
    return errors
