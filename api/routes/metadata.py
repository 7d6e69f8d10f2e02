"""Question metadata endpoints, proxied to the question API."""
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from api.dependencies.auth import get_question_api
from api.models.builder import MetadataCreate, MetadataUpdate
from api.services.structure_client import QuestionApiClient
from api.utils.errors import to_http_exception
from errors import PersistenceError

router = APIRouter(prefix="/api/metadata", tags=["metadata"])

QuestionApi = Annotated[QuestionApiClient, Depends(get_question_api)]


@router.get("")
def list_metadata(client: QuestionApi) -> Any:
    try:
        return client.list_metadata()
    except PersistenceError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{metadata_id}")
def get_metadata(metadata_id: int, client: QuestionApi) -> Any:
    try:
        return client.get_metadata(metadata_id)
    except PersistenceError as exc:
        raise to_http_exception(exc) from exc


@router.post("", status_code=201)
def create_metadata(payload: MetadataCreate, client: QuestionApi) -> Any:
    """Create the metadata record a question structure will attach to."""
    try:
        return client.create_metadata(payload.model_dump(exclude_none=True))
    except PersistenceError as exc:
        raise to_http_exception(exc) from exc


@router.patch("/{metadata_id}")
def update_metadata(metadata_id: int, payload: MetadataUpdate, client: QuestionApi) -> Any:
    try:
        return client.update_metadata(metadata_id, payload.model_dump(exclude_unset=True))
    except PersistenceError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/{metadata_id}")
def delete_metadata(metadata_id: int, client: QuestionApi) -> Any:
    try:
        return client.delete_metadata(metadata_id)
    except PersistenceError as exc:
        raise to_http_exception(exc) from exc
