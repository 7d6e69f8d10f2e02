"""Three-step question builder: choose a type, configure it, review and save.

State changes go through :func:`reduce`, which takes the current
:class:`~models.WizardState` and an action and returns a new state whose
form data shares nothing mutable with the old one. :class:`BuilderWizard`
owns one such state per editing session and is the only place that talks to
the remote question API.
"""
from __future__ import annotations

import copy
import logging
import random
import threading
from dataclasses import dataclass, replace
from typing import Any, Callable, Protocol, Sequence

from errors import (
    InvalidEditError,
    PersistenceError,
    SaveInProgressError,
    ValidationError,
    WizardStateError,
)
from models import DragState, QuestionType, SessionStatus, WizardState, WizardStep
from question_types import (
    get_default_structure,
    grid_dimensions,
    resize_headers,
    resolve_type,
    sync_blanks,
)
from serialization import project_display, render_display_json
from structure_validation import in_grid, validate_structure

logger = logging.getLogger(__name__)

NO_TYPE_SELECTED = "no type selected"

PathLike = str | Sequence[str | int]

_NEW_ITEMS: dict[str, dict[str, Any]] = {
    "options": {"text": "", "is_correct": False},
    "left_options": {"text": "", "is_correct": False},
    "right_options": {"text": "", "is_correct": False},
    "pairs": {"left": "", "right": ""},
    "items": {"text": ""},
}


class AnswerStructureStore(Protocol):
    def create_answer_structure(
        self, metadata_id: int, builder_type: str, data: dict[str, Any]
    ) -> dict[str, Any]: ...


@dataclass(frozen=True)
class SelectType:
    type_id: QuestionType | str


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class UpdateField:
    path: PathLike
    value: Any


@dataclass(frozen=True)
class AddItem:
    field: str
    item: Any = None


@dataclass(frozen=True)
class RemoveItem:
    field: str
    index: int


@dataclass(frozen=True)
class ReorderItem:
    from_index: int
    to_index: int


@dataclass(frozen=True)
class ToggleIntersection:
    row: int
    col: int


@dataclass(frozen=True)
class Cancel:
    pass


def _split_path(path: PathLike) -> list[str | int]:
    parts = path.split(".") if isinstance(path, str) else list(path)
    if not parts:
        raise InvalidEditError("field path is empty")
    segments: list[str | int] = []
    for part in parts:
        if isinstance(part, int) and not isinstance(part, bool):
            segments.append(part)
        elif isinstance(part, str) and part.isdigit():
            segments.append(int(part))
        elif isinstance(part, str) and part:
            segments.append(part)
        else:
            raise InvalidEditError(f"invalid field path: {path!r}")
    if not isinstance(segments[0], str):
        raise InvalidEditError(f"invalid field path: {path!r}")
    return segments


def _descend(container: Any, segment: str | int, create: bool) -> Any:
    if isinstance(container, dict) and isinstance(segment, str):
        child = container.get(segment)
        if child is None and create:
            child = container[segment] = {}
        if child is None:
            raise InvalidEditError(f"no field named {segment!r}")
        return child
    if isinstance(container, list) and isinstance(segment, int):
        if not 0 <= segment < len(container):
            raise InvalidEditError(f"index {segment} is out of range")
        return container[segment]
    raise InvalidEditError(f"cannot address {segment!r} here")


def _assign(container: Any, segment: str | int, value: Any) -> None:
    if isinstance(container, dict) and isinstance(segment, str):
        container[segment] = value
    elif isinstance(container, list) and isinstance(segment, int):
        if not 0 <= segment < len(container):
            raise InvalidEditError(f"index {segment} is out of range")
        container[segment] = value
    else:
        raise InvalidEditError(f"cannot assign {segment!r} here")


def _renumber(items: list[Any]) -> list[dict[str, Any]]:
    renumbered = []
    for index, item in enumerate(items, start=1):
        entry = dict(item) if isinstance(item, dict) else {"text": item}
        entry["order"] = index
        renumbered.append(entry)
    return renumbered


def _list_field(form_data: dict[str, Any], field: str) -> list[Any]:
    value = form_data.get(field)
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidEditError(f"{field} is not a list")
    return value


def _require_editable(state: WizardState) -> QuestionType:
    if not state.is_open:
        raise WizardStateError(f"builder session is {state.status.value}")
    if state.type_id is None:
        raise WizardStateError(NO_TYPE_SELECTED)
    return state.type_id


def _require_type(state: WizardState, expected: QuestionType, operation: str) -> None:
    if _require_editable(state) is not expected:
        raise WizardStateError(f"{operation} is only available for {expected.value} questions")


def _grid_dimension(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidEditError(f"grid {key} must be a positive integer")
    return value


def _apply_side_rules(type_id: QuestionType, segments: list[str | int], data: dict[str, Any]) -> None:
    head = segments[0]
    if type_id is QuestionType.LAC and segments == ["text_with_blanks"]:
        data["blanks"] = sync_blanks(data.get("text_with_blanks"), data.get("blanks"))
    elif type_id is QuestionType.ORD and head == "items" and isinstance(data.get("items"), list):
        data["items"] = _renumber(data["items"])
    elif type_id is QuestionType.GRID and head == "grid":
        grid = data.get("grid")
        if not isinstance(grid, dict):
            raise InvalidEditError("grid must be an object with rows and cols")
        for key, headers in (("rows", "rowHeaders"), ("cols", "colHeaders")):
            if key in grid:
                size = _grid_dimension(grid[key], key)
                data[headers] = resize_headers(data.get(headers), size)
        data["intersections"] = []


def _select_type(state: WizardState, action: SelectType) -> WizardState:
    if not state.is_open or state.step is not WizardStep.SELECT_TYPE:
        raise WizardStateError("the question type can only be chosen in the first step")
    type_id = resolve_type(action.type_id)
    return replace(state, type_id=type_id, form_data=get_default_structure(type_id))


def _advance(state: WizardState, action: Advance) -> WizardState:
    if not state.is_open:
        raise WizardStateError(f"builder session is {state.status.value}")
    if state.step is WizardStep.SELECT_TYPE:
        if state.type_id is None:
            raise ValidationError([NO_TYPE_SELECTED])
        return replace(state, step=WizardStep.CONFIGURE, form_data=copy.deepcopy(state.form_data))
    if state.step is WizardStep.CONFIGURE:
        return replace(state, step=WizardStep.REVIEW, form_data=copy.deepcopy(state.form_data))
    raise WizardStateError("already at the review step")


def _back(state: WizardState, action: Back) -> WizardState:
    if not state.is_open:
        raise WizardStateError(f"builder session is {state.status.value}")
    previous = {
        WizardStep.CONFIGURE: WizardStep.SELECT_TYPE,
        WizardStep.REVIEW: WizardStep.CONFIGURE,
    }.get(state.step)
    if previous is None:
        return state
    return replace(state, step=previous, form_data=copy.deepcopy(state.form_data))


def _update_field(state: WizardState, action: UpdateField) -> WizardState:
    type_id = _require_editable(state)
    segments = _split_path(action.path)
    data = copy.deepcopy(state.form_data)
    target = data
    for segment in segments[:-1]:
        target = _descend(target, segment, create=True)
    _assign(target, segments[-1], copy.deepcopy(action.value))
    _apply_side_rules(type_id, segments, data)
    return replace(state, form_data=data)


def _add_item(state: WizardState, action: AddItem) -> WizardState:
    type_id = _require_editable(state)
    data = copy.deepcopy(state.form_data)
    item = action.item if action.item is not None else _NEW_ITEMS.get(action.field)
    if item is None:
        raise InvalidEditError(f"an item is required to extend {action.field}")
    items = _list_field(data, action.field)
    items.append(copy.deepcopy(item))
    data[action.field] = items
    _apply_side_rules(type_id, [action.field], data)
    return replace(state, form_data=data)


def _remove_item(state: WizardState, action: RemoveItem) -> WizardState:
    type_id = _require_editable(state)
    data = copy.deepcopy(state.form_data)
    items = _list_field(data, action.field)
    if not 0 <= action.index < len(items):
        raise InvalidEditError(f"index {action.index} is out of range")
    del items[action.index]
    data[action.field] = items
    _apply_side_rules(type_id, [action.field], data)
    return replace(state, form_data=data)


def _reorder_item(state: WizardState, action: ReorderItem) -> WizardState:
    _require_type(state, QuestionType.ORD, "reordering")
    items = _list_field(state.form_data, "items")
    for index in (action.from_index, action.to_index):
        if not 0 <= index < len(items):
            raise InvalidEditError(f"index {index} is out of range")
    if action.from_index == action.to_index:
        return state
    data = copy.deepcopy(state.form_data)
    moved = data["items"].pop(action.from_index)
    data["items"].insert(action.to_index, moved)
    data["items"] = _renumber(data["items"])
    return replace(state, form_data=data)


def _toggle_intersection(state: WizardState, action: ToggleIntersection) -> WizardState:
    _require_type(state, QuestionType.GRID, "selecting intersections")
    rows, cols = grid_dimensions(state.form_data)
    if not in_grid(action.row, action.col, rows, cols):
        raise InvalidEditError(f"cell ({action.row}, {action.col}) is outside the grid")
    data = copy.deepcopy(state.form_data)
    cells = _list_field(data, "intersections")
    remaining = [
        cell
        for cell in cells
        if not (isinstance(cell, dict) and cell.get("row") == action.row and cell.get("col") == action.col)
    ]
    if len(remaining) == len(cells):
        remaining.append({"row": action.row, "col": action.col})
    data["intersections"] = remaining
    return replace(state, form_data=data)


def _cancel(state: WizardState, action: Cancel) -> WizardState:
    if state.status is SessionStatus.SAVED:
        raise WizardStateError("builder session is already saved")
    return replace(state, status=SessionStatus.CANCELLED, form_data={})


_REDUCERS: dict[type, Callable[[WizardState, Any], WizardState]] = {
    SelectType: _select_type,
    Advance: _advance,
    Back: _back,
    UpdateField: _update_field,
    AddItem: _add_item,
    RemoveItem: _remove_item,
    ReorderItem: _reorder_item,
    ToggleIntersection: _toggle_intersection,
    Cancel: _cancel,
}


def reduce(state: WizardState, action: object) -> WizardState:
    """Apply one builder action and return the resulting state."""
    handler = _REDUCERS.get(type(action))
    if handler is None:
        raise TypeError(f"unsupported builder action: {action!r}")
    return handler(state, action)


class BuilderWizard:
    """One question-structure editing session."""

    def __init__(self, metadata_id: int, state: WizardState | None = None):
        self.metadata_id = metadata_id
        self.state = state or WizardState()
        self.drag = DragState()
        self._lock = threading.RLock()
        self._save_lock = threading.Lock()

    def dispatch(self, action: object) -> WizardState:
        with self._lock:
            if self._save_lock.locked():
                raise SaveInProgressError("a save is in progress for this question")
            self.state = reduce(self.state, action)
            return self.state

    def select_type(self, type_id: QuestionType | str) -> WizardState:
        state = self.dispatch(SelectType(type_id))
        logger.info("Metadata %s: building a %s question", self.metadata_id, state.type_id.value)
        return state

    def advance(self) -> WizardState:
        return self.dispatch(Advance())

    def back(self) -> WizardState:
        return self.dispatch(Back())

    def update_field(self, path: PathLike, value: Any) -> WizardState:
        return self.dispatch(UpdateField(path, value))

    def add_item(self, field: str, item: Any = None) -> WizardState:
        return self.dispatch(AddItem(field, item))

    def remove_item(self, field: str, index: int) -> WizardState:
        return self.dispatch(RemoveItem(field, index))

    def reorder_item(self, from_index: int, to_index: int) -> WizardState:
        return self.dispatch(ReorderItem(from_index, to_index))

    def toggle_intersection(self, row: int, col: int) -> WizardState:
        return self.dispatch(ToggleIntersection(row, col))

    def cancel(self) -> WizardState:
        state = self.dispatch(Cancel())
        logger.info("Metadata %s: builder session cancelled", self.metadata_id)
        return state

    def start_drag(self, index: int) -> None:
        self.drag.start(index)

    def drop(self, index: int) -> WizardState:
        move = self.drag.drop(index)
        if move is None:
            return self.state
        return self.reorder_item(*move)

    def end_drag(self) -> None:
        self.drag.end()

    def validate(self) -> list[str]:
        state = self.state
        if state.type_id is None:
            return [NO_TYPE_SELECTED]
        return validate_structure(state.type_id, state.form_data)

    def preview(self, rng: random.Random | None = None) -> dict[str, Any]:
        state = self.state
        if state.type_id is None:
            raise WizardStateError(NO_TYPE_SELECTED)
        return project_display(state.type_id, state.form_data, rng)

    def preview_json(self, rng: random.Random | None = None) -> str:
        return render_display_json(self.preview(rng))

    def save(self, client: AnswerStructureStore) -> dict[str, Any]:
        """Validate, project and persist the question structure once.

        Raises:
            SaveInProgressError: another save for this session is running.
            WizardStateError: not at the review step, or the session is closed.
            ValidationError: the form data is not save-ready; nothing is sent.
            PersistenceError: the remote API failed; the form data is kept.
        """
        # an edit already inside dispatch finishes before the snapshot is taken
        with self._lock:
            if not self._save_lock.acquire(blocking=False):
                raise SaveInProgressError("a save is already in progress for this question")
            state = self.state
        try:
            if state.status is SessionStatus.SAVED:
                raise WizardStateError("this question structure is already saved")
            if not state.is_open:
                raise WizardStateError(f"builder session is {state.status.value}")
            if state.step is not WizardStep.REVIEW:
                raise WizardStateError("save is only available from the review step")

            errors = validate_structure(state.type_id, state.form_data)
            if errors:
                raise ValidationError(errors)

            payload = project_display(state.type_id, state.form_data)
            builder_type = state.type_id.value
            logger.info("Metadata %s: saving %s structure", self.metadata_id, builder_type)
            try:
                structure = client.create_answer_structure(self.metadata_id, builder_type, payload)
            except PersistenceError as exc:
                logger.warning(
                    "Metadata %s: saving %s structure failed: %s",
                    self.metadata_id,
                    builder_type,
                    exc.message,
                )
                raise

            with self._lock:
                self.state = replace(self.state, status=SessionStatus.SAVED, form_data={})
            logger.info("Metadata %s: %s structure saved", self.metadata_id, builder_type)
            return {"structure": structure, "display": payload}
        finally:
            self._save_lock.release()

    def to_dict(self) -> dict[str, Any]:
        state = self.state
        return {
            "metadataId": self.metadata_id,
            "step": state.step.value,
            "typeId": state.type_id.value if state.type_id else None,
            "status": state.status.value,
            "formData": copy.deepcopy(state.form_data),
            "validationErrors": self.validate() if state.is_open else [],
        }
