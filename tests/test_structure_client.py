import pytest
import requests

from api.services import structure_client
from api.services.structure_client import QuestionApiClient
from errors import PersistenceError


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.content = text.encode() if text is not None else (b"{}" if payload is not None else b"")

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeSession:
    responses: list = []

    def __init__(self):
        self.headers = {}
        self.calls = []
        self.closed = False

    def request(self, method, url, json=None, timeout=None):
        self.calls.append((method, url, json, timeout))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session(monkeypatch: pytest.MonkeyPatch):
    FakeSession.responses = []
    monkeypatch.setattr(structure_client.requests, "Session", FakeSession)
    return FakeSession


def test_create_answer_structure_posts_payload(fake_session) -> None:
    fake_session.responses.append(FakeResponse(201, {"id": 5}))
    client = QuestionApiClient("https://questions.example.com/", token="secret", timeout=3)

    result = client.create_answer_structure(12, "QCM_S", {"type": "QCM_S"})

    assert result == {"id": 5}
    assert client.session.headers["Authorization"] == "Bearer secret"
    assert client.session.calls == [
        (
            "POST",
            "https://questions.example.com/questions/v2/answer-structure/create/",
            {"metadata_id": 12, "builderType": "QCM_S", "data": {"type": "QCM_S"}},
            3,
        )
    ]


def test_without_token_no_authorization_header(fake_session) -> None:
    client = QuestionApiClient("https://questions.example.com")
    assert "Authorization" not in client.session.headers


def test_metadata_endpoints(fake_session) -> None:
    fake_session.responses.extend(
        [
            FakeResponse(200, [{"id": 1}]),
            FakeResponse(200, {"id": 1}),
            FakeResponse(201, {"id": 2}),
            FakeResponse(200, {"id": 2, "titre": "Nouveau"}),
            FakeResponse(204),
        ]
    )
    client = QuestionApiClient("https://questions.example.com")

    assert client.list_metadata() == [{"id": 1}]
    assert client.get_metadata(1) == {"id": 1}
    assert client.create_metadata({"titre": "Titre"}) == {"id": 2}
    assert client.update_metadata(2, {"titre": "Nouveau"}) == {"id": 2, "titre": "Nouveau"}
    assert client.delete_metadata(2) == {}

    assert [(method, url) for method, url, _, _ in client.session.calls] == [
        ("GET", "https://questions.example.com/questions/v2/metadata/"),
        ("GET", "https://questions.example.com/questions/v2/metadata/1/"),
        ("POST", "https://questions.example.com/questions/v2/metadata/"),
        ("PATCH", "https://questions.example.com/questions/v2/metadata/2/"),
        ("DELETE", "https://questions.example.com/questions/v2/metadata/2/"),
    ]


def test_error_message_comes_from_the_body(fake_session) -> None:
    fake_session.responses.append(FakeResponse(400, {"message": "metadata_id is unknown"}))
    client = QuestionApiClient("https://questions.example.com")

    with pytest.raises(PersistenceError) as excinfo:
        client.create_answer_structure(1, "VF", {})
    assert excinfo.value.message == "metadata_id is unknown"
    assert excinfo.value.status_code == 400


def test_error_without_body_uses_status(fake_session) -> None:
    fake_session.responses.append(FakeResponse(500, text="<html>oops</html>"))
    client = QuestionApiClient("https://questions.example.com")

    with pytest.raises(PersistenceError) as excinfo:
        client.create_answer_structure(1, "VF", {})
    assert excinfo.value.message == "request failed with status 500"
    assert excinfo.value.status_code == 500


def test_transport_failure(fake_session) -> None:
    fake_session.responses.append(requests.ConnectionError("connection refused"))
    client = QuestionApiClient("https://questions.example.com")

    with pytest.raises(PersistenceError) as excinfo:
        client.list_metadata()
    assert excinfo.value.message == structure_client.UNREACHABLE
    assert excinfo.value.status_code is None


def test_close_closes_the_session(fake_session) -> None:
    client = QuestionApiClient("https://questions.example.com")
    client.close()
    assert client.session.closed
