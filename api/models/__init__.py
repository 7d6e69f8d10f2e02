"""Pydantic models."""
from api.models.builder import (
    FieldUpdate,
    IntersectionToggle,
    ItemAdd,
    MetadataCreate,
    MetadataUpdate,
    ReorderRequest,
    SessionCreate,
    TypeSelection,
)

__all__ = [
    "FieldUpdate",
    "IntersectionToggle",
    "ItemAdd",
    "MetadataCreate",
    "MetadataUpdate",
    "ReorderRequest",
    "SessionCreate",
    "TypeSelection",
]
