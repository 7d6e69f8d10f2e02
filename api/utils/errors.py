"""Translation of builder errors into HTTP responses."""
from fastapi import HTTPException, status

from errors import (
    BuilderError,
    InvalidEditError,
    PersistenceError,
    UnknownTypeError,
    ValidationError,
    WizardStateError,
)

_PASSTHROUGH_STATUSES = {status.HTTP_401_UNAUTHORIZED, status.HTTP_404_NOT_FOUND}


def to_http_exception(
    exc: BuilderError, unknown_type_status: int = status.HTTP_400_BAD_REQUEST
) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=422,
            detail={"message": "Question structure is not valid", "errors": exc.errors},
        )
    if isinstance(exc, UnknownTypeError):
        return HTTPException(status_code=unknown_type_status, detail=str(exc))
    if isinstance(exc, WizardStateError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, InvalidEditError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, PersistenceError):
        code = exc.status_code if exc.status_code in _PASSTHROUGH_STATUSES else status.HTTP_502_BAD_GATEWAY
        return HTTPException(status_code=code, detail=exc.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
