# flake8: noqa
import json

import pytest
from fastapi.testclient import TestClient

from ashpaz.app import create_app
from ashpaz.config import Settings
from ashpaz.database import Database
from ashpaz.llm_backends import CompletionBackend


TEA_RECIPE = {
    "title": "Tea",
    "ingredients": [{"name": "water"}],
    "steps": [{"id": 1, "description": "Boil water"}],
}


class StubBackend(CompletionBackend):
    """Returns canned completions in order and records every prompt it was sent."""

    name = "stub"

    def __init__(self, *responses, api_key="test-key"):
        super().__init__(api_key, "stub-model")
        self.responses = list(responses)
        self.payloads = []

    def request_completion(self, payload):
        self._require_credential()
        self.payloads.append(payload)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


class UnconfiguredBackend(CompletionBackend):
    """No credential: behaves like a real backend with an empty API key."""

    name = "unconfigured"

    def __init__(self):
        super().__init__("", "none")
        self.calls = 0

    def request_completion(self, payload):
        self.calls += 1
        self._require_credential()
        raise AssertionError("unreachable")


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        jwt_secret="test-secret",
        google_client_id="google-client",
        google_client_secret="google-secret",
        public_base_url="http://testserver",
        log_level="WARNING",
    )


@pytest.fixture
def backend():
    return StubBackend(json.dumps(TEA_RECIPE))


@pytest.fixture
def database(settings):
    db = Database.from_settings(settings)
    yield db
    db.dispose()


@pytest.fixture
def client(settings, database, backend):
    app = create_app(settings=settings, database=database, backend=backend)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user_client(client):
    """Client already signed in (session cookie set by registration)."""
    res = client.post(
        "/api/users/register",
        json={"email": "cook@example.com", "password": "secret-pass", "name": "Cook"},
    )
    assert res.status_code == 201
    return client
