"""Question type catalog endpoints."""
import random

from fastapi import APIRouter, Body, status

from api.utils.errors import to_http_exception
from errors import UnknownTypeError
from question_types import get_default_structure, get_descriptor, list_types
from serialization import project_display
from structure_validation import validate_structure

router = APIRouter(prefix="/api/question-types", tags=["question-types"])


def _descriptor(type_id: str):
    try:
        return get_descriptor(type_id)
    except UnknownTypeError as exc:
        raise to_http_exception(exc, unknown_type_status=status.HTTP_404_NOT_FOUND) from exc


@router.get("")
def list_question_types() -> list[dict[str, object]]:
    """List every question type the builder supports."""
    return [descriptor.to_dict() for descriptor in list_types()]


@router.get("/{type_id}")
def get_question_type(type_id: str) -> dict[str, object]:
    """Get one question type with its empty form data."""
    descriptor = _descriptor(type_id)
    return {**descriptor.to_dict(), "structure": get_default_structure(descriptor.id)}


@router.post("/{type_id}/validate")
def validate_question(
    type_id: str,
    form_data: dict[str, object] = Body(...),
) -> dict[str, object]:
    """Check form data without opening a session."""
    descriptor = _descriptor(type_id)
    errors = validate_structure(descriptor.id, form_data)
    return {"valid": not errors, "errors": errors}


@router.post("/{type_id}/preview")
def preview_question(
    type_id: str,
    form_data: dict[str, object] = Body(...),
    seed: int | None = None,
) -> dict[str, object]:
    """Project form data into its display payload, complete or not."""
    descriptor = _descriptor(type_id)
    rng = random.Random(seed) if seed is not None else None
    return project_display(descriptor.id, form_data, rng)
