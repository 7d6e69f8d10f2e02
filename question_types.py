"""Catalog of the question types the builder can produce."""
from __future__ import annotations

import copy
import re
from typing import Any, Iterable, Mapping

from errors import UnknownTypeError
from models import QuestionType, QuestionTypeDescriptor

BLANK_PATTERN = re.compile(r"\$\{\{([^}]*)\}\}")
BLANK_MARKER = "____"

DEFAULT_GRID_SIZE = 3


def _structure(**fields: Any) -> dict[str, Any]:
    base: dict[str, Any] = {"content": "", "image": None, "explanation": ""}
    base.update(fields)
    return base


_CATALOG: tuple[QuestionTypeDescriptor, ...] = (
    QuestionTypeDescriptor(
        id=QuestionType.VF,
        name="True or false",
        description="Statement the learner marks as true or false",
        display_type="true_false",
        structure=_structure(correct_answer=None),
    ),
    QuestionTypeDescriptor(
        id=QuestionType.QCM_S,
        name="Single choice",
        description="Multiple choice question with one correct answer",
        display_type="single_choice",
        structure=_structure(options=[]),
    ),
    QuestionTypeDescriptor(
        id=QuestionType.QRM,
        name="Multiple choice",
        description="Multiple choice question with several correct answers",
        display_type="multiple_choice",
        structure=_structure(options=[]),
    ),
    QuestionTypeDescriptor(
        id=QuestionType.QCM_PA,
        name="Activity choice",
        description="Two independent option columns, each with its own correct answers",
        display_type="activity_mcq",
        structure=_structure(left_options=[], right_options=[]),
    ),
    QuestionTypeDescriptor(
        id=QuestionType.QCM_P,
        name="Paired assertions",
        description="Two assertions and the logical relation between them",
        display_type="paired_assertions",
        structure=_structure(assertion_a="", assertion_b="", correct_option=None),
    ),
    QuestionTypeDescriptor(
        id=QuestionType.QAA,
        name="Matching",
        description="Associate each left item with its right counterpart",
        display_type="matching",
        structure=_structure(pairs=[]),
    ),
    QuestionTypeDescriptor(
        id=QuestionType.ORD,
        name="Ordering",
        description="Arrange items in the correct sequence",
        display_type="ordering",
        structure=_structure(items=[]),
    ),
    QuestionTypeDescriptor(
        id=QuestionType.LAC,
        name="Fill in the blanks",
        description="Text with gaps the learner completes",
        display_type="fill_in_blanks",
        structure=_structure(text_with_blanks="", blanks=[]),
    ),
    QuestionTypeDescriptor(
        id=QuestionType.GRID,
        name="Grid",
        description="Select the correct intersections in a grid",
        display_type="grid_intersections",
        structure=_structure(
            grid={"rows": DEFAULT_GRID_SIZE, "cols": DEFAULT_GRID_SIZE},
            rowHeaders=[""] * DEFAULT_GRID_SIZE,
            colHeaders=[""] * DEFAULT_GRID_SIZE,
            intersections=[],
        ),
    ),
)

_BY_ID = {descriptor.id: descriptor for descriptor in _CATALOG}


def list_types() -> tuple[QuestionTypeDescriptor, ...]:
    return _CATALOG


def resolve_type(type_id: object) -> QuestionType:
    """Look up a type id, given as an enum member or its exact string value."""
    if isinstance(type_id, QuestionType):
        return type_id
    if isinstance(type_id, str):
        try:
            return QuestionType(type_id)
        except ValueError:
            pass
    raise UnknownTypeError(type_id)


def get_descriptor(type_id: object) -> QuestionTypeDescriptor:
    return _BY_ID[resolve_type(type_id)]


def get_default_structure(type_id: object) -> dict[str, Any]:
    """Return an independent zero-value form data record for ``type_id``."""
    return copy.deepcopy(get_descriptor(type_id).structure)


def scan_placeholders(text: object) -> list[str]:
    if not isinstance(text, str):
        return []
    return BLANK_PATTERN.findall(text)


def sync_blanks(text: object, existing: Iterable[Any] | None) -> list[dict[str, Any]]:
    """Rebuild the blank list from the placeholders found in ``text``.

    Answers already typed for a blank survive as long as a blank still
    exists at the same position.
    """
    previous = list(existing) if isinstance(existing, list) else []
    blanks = []
    for index, placeholder in enumerate(scan_placeholders(text)):
        old = previous[index] if index < len(previous) else None
        answer = old.get("answer") if isinstance(old, dict) else None
        blanks.append(
            {
                "position": index + 1,
                "answer": answer or placeholder,
                "placeholder": placeholder,
            }
        )
    return blanks


def grid_dimensions(form_data: Mapping[str, Any]) -> tuple[int, int]:
    """Rows and columns of a GRID question; anything but a positive int reads as the default."""
    grid = form_data.get("grid")
    sizes = []
    for key in ("rows", "cols"):
        value = grid.get(key) if isinstance(grid, dict) else None
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            value = DEFAULT_GRID_SIZE
        sizes.append(value)
    return sizes[0], sizes[1]


def resize_headers(headers: object, size: int) -> list[str]:
    values = list(headers) if isinstance(headers, list) else []
    values = values[:size]
    while len(values) < size:
        values.append("")
    return values
