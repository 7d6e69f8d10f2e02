"""Pydantic models for the builder API."""

from typing import Any

from pydantic import BaseModel, Field


# Builder sessions


class SessionCreate(BaseModel):
    """Request to open a builder session for a metadata record."""

    metadata_id: int


class TypeSelection(BaseModel):
    type_id: str


class FieldUpdate(BaseModel):
    """Set one field of the form data.

    ``path`` is dotted (``"options.0.text"``) or a list of keys and indexes.
    """

    path: str | list[str | int]
    value: Any = None


class ItemAdd(BaseModel):
    field: str
    item: Any = None


class ReorderRequest(BaseModel):
    from_index: int = Field(ge=0)
    to_index: int = Field(ge=0)


class IntersectionToggle(BaseModel):
    row: int
    col: int


# Question metadata


class MetadataCreate(BaseModel):
    """Question metadata as stored by the question API."""

    titre: str = Field(min_length=1)
    annee: int | None = None
    examen: int
    serie: int | None = None
    matiere: int
    chapitre: int
    niveau: int | None = None


class MetadataUpdate(BaseModel):
    titre: str | None = Field(default=None, min_length=1)
    annee: int | None = None
    examen: int | None = None
    serie: int | None = None
    matiere: int | None = None
    chapitre: int | None = None
    niveau: int | None = None
