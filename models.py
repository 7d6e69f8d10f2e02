from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class QuestionType(str, Enum):
    VF = "VF"
    QCM_S = "QCM_S"
    QRM = "QRM"
    QCM_PA = "QCM_PA"
    QCM_P = "QCM_P"
    QAA = "QAA"
    ORD = "ORD"
    LAC = "LAC"
    GRID = "GRID"


class WizardStep(str, Enum):
    SELECT_TYPE = "select_type"
    CONFIGURE = "configure"
    REVIEW = "review"


class SessionStatus(str, Enum):
    EDITING = "editing"
    SAVED = "saved"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class QuestionTypeDescriptor:
    id: QuestionType
    name: str
    description: str
    display_type: str  # value of display.type in the projected payload
    structure: Dict[str, Any] = field(default_factory=dict, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id.value,
            "name": self.name,
            "description": self.description,
            "displayType": self.display_type,
        }


@dataclass(frozen=True)
class WizardState:
    step: WizardStep = WizardStep.SELECT_TYPE
    type_id: QuestionType | None = None
    form_data: Dict[str, Any] = field(default_factory=dict)
    status: SessionStatus = SessionStatus.EDITING

    @property
    def is_open(self) -> bool:
        return self.status is SessionStatus.EDITING


@dataclass
class DragState:
    """Transient drag-and-drop selection of the ordering editor."""

    dragged_index: int | None = None

    def start(self, index: int) -> None:
        self.dragged_index = index

    def drop(self, index: int) -> tuple[int, int] | None:
        """Finish a drag on ``index``; returns the move to apply, if any."""
        source = self.dragged_index
        self.dragged_index = None
        if source is None or source == index:
            return None
        return source, index

    def end(self) -> None:
        self.dragged_index = None
