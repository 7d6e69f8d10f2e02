"""Client for the remote question API that stores metadata and answer structures."""
from __future__ import annotations

import logging
from typing import Any

import requests

from api.config import (
    ANSWER_STRUCTURE_PATH,
    METADATA_PATH,
    QUESTION_API_TIMEOUT_SECONDS,
    QUESTION_API_URL,
)
from errors import PersistenceError

log = logging.getLogger(__name__)

UNREACHABLE = "could not reach the question service"


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return f"request failed with status {response.status_code}"


class QuestionApiClient:
    def __init__(
        self,
        base_url: str = QUESTION_API_URL,
        token: str | None = None,
        timeout: int = QUESTION_API_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {"Content-Type": "application/json", "Accept": "application/json"}
        )
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})

    def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            log.warning("%s %s failed: %s", method, url, exc)
            raise PersistenceError(UNREACHABLE) from exc

        if not response.ok:
            message = _error_message(response)
            log.warning("%s %s returned %s: %s", method, url, response.status_code, message)
            raise PersistenceError(message, status_code=response.status_code)

        log.debug("%s %s returned %s", method, url, response.status_code)
        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise PersistenceError("the question service returned invalid JSON") from exc

    def create_answer_structure(
        self, metadata_id: int, builder_type: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        """Attach a projected answer structure to an existing metadata record."""
        return self._request(
            "POST",
            ANSWER_STRUCTURE_PATH,
            {"metadata_id": metadata_id, "builderType": builder_type, "data": data},
        )

    def list_metadata(self) -> Any:
        return self._request("GET", METADATA_PATH)

    def get_metadata(self, metadata_id: int) -> Any:
        return self._request("GET", f"{METADATA_PATH}{metadata_id}/")

    def create_metadata(self, payload: dict[str, Any]) -> Any:
        return self._request("POST", METADATA_PATH, payload)

    def update_metadata(self, metadata_id: int, payload: dict[str, Any]) -> Any:
        return self._request("PATCH", f"{METADATA_PATH}{metadata_id}/", payload)

    def delete_metadata(self, metadata_id: int) -> Any:
        return self._request("DELETE", f"{METADATA_PATH}{metadata_id}/")

    def close(self) -> None:
        self.session.close()
