"""Authentication dependencies for FastAPI."""
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api import config
from api.services.structure_client import QuestionApiClient

# HTTP Bearer scheme; the token is forwarded to the question API
security = HTTPBearer(auto_error=False)


def get_api_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Token used against the question API.

    Raises:
        HTTPException: 401 if the caller sent none and no service token is configured.
    """
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    if config.QUESTION_API_TOKEN:
        return config.QUESTION_API_TOKEN
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_question_api(token: Annotated[str, Depends(get_api_token)]):
    client = QuestionApiClient(config.QUESTION_API_URL, token=token)
    try:
        yield client
    finally:
        client.close()
