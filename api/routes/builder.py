"""Builder session endpoints: choose a type, configure it, review and save."""
import random
from typing import Annotated, Callable

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from api.dependencies.auth import get_question_api
from api.models.builder import (
    FieldUpdate,
    IntersectionToggle,
    ItemAdd,
    ReorderRequest,
    SessionCreate,
    TypeSelection,
)
from api.services import session_store
from api.services.structure_client import QuestionApiClient
from api.utils.errors import to_http_exception
from api.utils.validation import validate_id
from builder import BuilderWizard
from errors import BuilderError
from models import SessionStatus

router = APIRouter(prefix="/api/builder/sessions", tags=["builder"])


def _view(session_id: str, wizard: BuilderWizard) -> dict[str, object]:
    return {"sessionId": session_id, **wizard.to_dict()}


def _load(session_id: str) -> tuple[str, BuilderWizard]:
    session_id = validate_id("session_id", session_id)
    return session_id, session_store.get_session(session_id)


def _apply(session_id: str, operation: Callable[[BuilderWizard], object]) -> dict[str, object]:
    session_id, wizard = _load(session_id)
    try:
        operation(wizard)
    except BuilderError as exc:
        raise to_http_exception(exc) from exc
    return _view(session_id, wizard)


def _rng(seed: int | None) -> random.Random | None:
    return random.Random(seed) if seed is not None else None


@router.post("", status_code=201)
def create_session(payload: SessionCreate) -> dict[str, object]:
    """Open a builder session for an existing metadata record."""
    session_id, wizard = session_store.create_session(payload.metadata_id)
    return _view(session_id, wizard)


@router.get("/{session_id}")
def get_session(session_id: str) -> dict[str, object]:
    session_id, wizard = _load(session_id)
    return _view(session_id, wizard)


@router.delete("/{session_id}")
def close_session(session_id: str) -> dict[str, object]:
    """Cancel the session and discard its form data."""
    session_id, wizard = _load(session_id)
    if wizard.state.status is not SessionStatus.SAVED:
        try:
            wizard.cancel()
        except BuilderError as exc:
            raise to_http_exception(exc) from exc
    session_store.discard_session(session_id)
    return _view(session_id, wizard)


@router.post("/{session_id}/type")
def select_type(session_id: str, payload: TypeSelection) -> dict[str, object]:
    return _apply(session_id, lambda wizard: wizard.select_type(payload.type_id))


@router.post("/{session_id}/advance")
def advance(session_id: str) -> dict[str, object]:
    return _apply(session_id, lambda wizard: wizard.advance())


@router.post("/{session_id}/back")
def back(session_id: str) -> dict[str, object]:
    return _apply(session_id, lambda wizard: wizard.back())


@router.patch("/{session_id}/fields")
def update_field(session_id: str, payload: FieldUpdate) -> dict[str, object]:
    return _apply(session_id, lambda wizard: wizard.update_field(payload.path, payload.value))


@router.post("/{session_id}/items")
def add_item(session_id: str, payload: ItemAdd) -> dict[str, object]:
    return _apply(session_id, lambda wizard: wizard.add_item(payload.field, payload.item))


@router.delete("/{session_id}/items/{field}/{index}")
def remove_item(session_id: str, field: str, index: int) -> dict[str, object]:
    return _apply(session_id, lambda wizard: wizard.remove_item(field, index))


@router.post("/{session_id}/reorder")
def reorder_item(session_id: str, payload: ReorderRequest) -> dict[str, object]:
    return _apply(
        session_id, lambda wizard: wizard.reorder_item(payload.from_index, payload.to_index)
    )


@router.post("/{session_id}/intersections")
def toggle_intersection(session_id: str, payload: IntersectionToggle) -> dict[str, object]:
    return _apply(session_id, lambda wizard: wizard.toggle_intersection(payload.row, payload.col))


@router.get("/{session_id}/validation")
def get_validation(session_id: str) -> dict[str, object]:
    _, wizard = _load(session_id)
    errors = wizard.validate()
    return {"valid": not errors, "errors": errors}


@router.get("/{session_id}/preview")
def get_preview(session_id: str, seed: int | None = Query(default=None)) -> dict[str, object]:
    """Display payload of the current form data, as shown on the review step."""
    _, wizard = _load(session_id)
    try:
        return wizard.preview(_rng(seed))
    except BuilderError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{session_id}/preview.json", response_class=PlainTextResponse)
def get_preview_json(session_id: str, seed: int | None = Query(default=None)) -> str:
    """Formatted JSON of the display payload, for copying."""
    _, wizard = _load(session_id)
    try:
        return wizard.preview_json(_rng(seed))
    except BuilderError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{session_id}/save")
def save_session(
    session_id: str,
    client: Annotated[QuestionApiClient, Depends(get_question_api)],
) -> dict[str, object]:
    """Persist the reviewed structure against its metadata record."""
    session_id, wizard = _load(session_id)
    try:
        result = wizard.save(client)
    except BuilderError as exc:
        raise to_http_exception(exc) from exc
    session_store.discard_session(session_id)
    return {"session": _view(session_id, wizard), **result}
