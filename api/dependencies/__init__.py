"""FastAPI dependencies."""
from api.dependencies.auth import get_api_token, get_question_api

__all__ = ["get_api_token", "get_question_api"]
