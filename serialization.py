from __future__ import annotations

import random
from typing import Any, Callable, Mapping

from api.utils.json_utils import json_dump
from api.utils.time_utils import utc_now
from models import QuestionType
from question_types import (
    BLANK_MARKER,
    BLANK_PATTERN,
    get_descriptor,
    grid_dimensions,
    sync_blanks,
)
from structure_validation import in_grid

TRUE_FALSE_OPTIONS = (
    {"value": True, "label": "True", "order": 1},
    {"value": False, "label": "False", "order": 2},
)

RELATION_OPTIONS = (
    {"id": "A", "label": "A and B are true, and B follows from A", "order": 1},
    {"id": "B", "label": "A and B are true, but B does not follow from A", "order": 2},
    {"id": "C", "label": "A is true and B is false", "order": 3},
    {"id": "D", "label": "A is false and B is true", "order": 4},
    {"id": "E", "label": "A and B are false", "order": 5},
)

MATCHING_INSTRUCTION = "Match each item on the left with its counterpart on the right"
GRID_INSTRUCTION = "Select the correct intersections between the rows and the columns"

Projector = Callable[[Mapping[str, Any], random.Random], dict[str, Any]]


def _list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    return value if isinstance(value, list) else []


def _records(data: Mapping[str, Any], key: str) -> list[dict[str, Any]]:
    return [item if isinstance(item, dict) else {} for item in _list(data, key)]


def _string(value: object) -> str:
    return value if isinstance(value, str) else ""


def _options(options: list[dict[str, Any]], prefix: str = "") -> list[dict[str, Any]]:
    return [
        {
            "id": f"{prefix}{index}" if prefix else index,
            "text": _string(option.get("text")),
            "isCorrect": bool(option.get("is_correct")),
            "order": index,
        }
        for index, option in enumerate(options, start=1)
    ]


def _shuffled(items: list[dict[str, Any]], rng: random.Random) -> list[dict[str, Any]]:
    return rng.sample([dict(item) for item in items], len(items))


def _project_true_false(data: Mapping[str, Any], rng: random.Random) -> dict[str, Any]:
    return {
        "correctAnswer": data.get("correct_answer"),
        "options": [dict(option) for option in TRUE_FALSE_OPTIONS],
    }


def _project_single_choice(data: Mapping[str, Any], rng: random.Random) -> dict[str, Any]:
    return {"options": _options(_records(data, "options"))}


def _project_multiple_choice(data: Mapping[str, Any], rng: random.Random) -> dict[str, Any]:
    options = _options(_records(data, "options"))
    correct = sum(1 for option in options if option["isCorrect"])
    return {"options": options, "minSelections": 1, "maxSelections": max(correct, 1)}


def _project_activity(data: Mapping[str, Any], rng: random.Random) -> dict[str, Any]:
    return {
        "left_column": {
            "title": "Left column",
            "options": _options(_records(data, "left_options"), prefix="L"),
        },
        "right_column": {
            "title": "Right column",
            "options": _options(_records(data, "right_options"), prefix="R"),
        },
    }


def _project_assertions(data: Mapping[str, Any], rng: random.Random) -> dict[str, Any]:
    return {
        "assertionA": _string(data.get("assertion_a")),
        "assertionB": _string(data.get("assertion_b")),
        "correctOption": data.get("correct_option"),
        "options": [dict(option) for option in RELATION_OPTIONS],
    }


def _project_matching(data: Mapping[str, Any], rng: random.Random) -> dict[str, Any]:
    pairs = _records(data, "pairs")
    left = [
        {"id": f"L{index}", "text": _string(pair.get("left")), "order": index}
        for index, pair in enumerate(pairs, start=1)
    ]
    right = [
        {"id": f"R{index}", "text": _string(pair.get("right"))}
        for index, pair in enumerate(pairs, start=1)
    ]
    associations = [
        {
            "leftId": f"L{index}",
            "rightId": f"R{index}",
            "leftText": _string(pair.get("left")),
            "rightText": _string(pair.get("right")),
        }
        for index, pair in enumerate(pairs, start=1)
    ]
    return {
        "leftColumn": left,
        "rightColumn": _shuffled(right, rng),
        "correctAssociations": associations,
        "instruction": MATCHING_INSTRUCTION,
    }


def _project_ordering(data: Mapping[str, Any], rng: random.Random) -> dict[str, Any]:
    items = _records(data, "items")
    correct_order = [
        {"id": index, "text": _string(item.get("text")), "position": index}
        for index, item in enumerate(items, start=1)
    ]
    presented = [{"id": entry["id"], "text": entry["text"]} for entry in correct_order]
    return {"correctOrder": correct_order, "shuffledItems": _shuffled(presented, rng)}


def _project_blanks(data: Mapping[str, Any], rng: random.Random) -> dict[str, Any]:
    text = _string(data.get("text_with_blanks"))
    blanks = sync_blanks(text, _list(data, "blanks"))
    return {
        "textWithBlanks": text,
        "displayText": BLANK_PATTERN.sub(BLANK_MARKER, text),
        "blanks": [
            {
                "id": index,
                "position": blank["position"],
                "correctAnswer": blank["answer"],
                "placeholder": blank["placeholder"] or f"blank_{index}",
            }
            for index, blank in enumerate(blanks, start=1)
        ],
    }


def _label(headers: list[Any], index: int, fallback: str) -> str:
    header = headers[index] if index < len(headers) else None
    if isinstance(header, str) and header.strip():
        return header
    return f"{fallback} {index + 1}"


def _project_grid(data: Mapping[str, Any], rng: random.Random) -> dict[str, Any]:
    rows, cols = grid_dimensions(data)
    row_headers, col_headers = _list(data, "rowHeaders"), _list(data, "colHeaders")
    intersections = [
        cell
        for cell in _records(data, "intersections")
        if in_grid(cell.get("row"), cell.get("col"), rows, cols)
    ]
    return {
        "grid": {"rows": rows, "cols": cols},
        "rowHeaders": [
            {"index": index, "label": _label(row_headers, index, "Row")}
            for index in range(rows)
        ],
        "colHeaders": [
            {"index": index, "label": _label(col_headers, index, "Col")}
            for index in range(cols)
        ],
        "correctIntersections": [
            {
                "rowIndex": cell["row"],
                "colIndex": cell["col"],
                "rowLabel": _label(row_headers, cell["row"], "Row"),
                "colLabel": _label(col_headers, cell["col"], "Col"),
            }
            for cell in intersections
        ],
        "instruction": GRID_INSTRUCTION,
    }


_PROJECTORS: dict[QuestionType, Projector] = {
    QuestionType.VF: _project_true_false,
    QuestionType.QCM_S: _project_single_choice,
    QuestionType.QRM: _project_multiple_choice,
    QuestionType.QCM_PA: _project_activity,
    QuestionType.QCM_P: _project_assertions,
    QuestionType.QAA: _project_matching,
    QuestionType.ORD: _project_ordering,
    QuestionType.LAC: _project_blanks,
    QuestionType.GRID: _project_grid,
}


def project_display(
    type_id: object,
    form_data: Mapping[str, Any] | None,
    rng: random.Random | None = None,
) -> dict[str, Any]:
    """Build the client-facing display payload for a question.

    Partial data is tolerated so the result can back a live preview.
    ``rng`` drives the presentation shuffles of matching and ordering
    questions; the answer key next to them is never reordered.
    """
    descriptor = get_descriptor(type_id)
    data = form_data if isinstance(form_data, Mapping) else {}
    question: dict[str, Any] = {
        "content": _string(data.get("content")),
        "image": data.get("image") or None,
    }
    explanation = _string(data.get("explanation")).strip()
    if explanation:
        question["explanation"] = explanation

    display = {"type": descriptor.display_type}
    display.update(_PROJECTORS[descriptor.id](data, rng or random.Random()))
    return {
        "type": descriptor.id.value,
        "question": question,
        "timestamp": utc_now(),
        "display": display,
    }


def render_display_json(payload: Mapping[str, Any]) -> str:
    """Formatted JSON text of a display payload, ready to copy."""
    return json_dump(payload)
