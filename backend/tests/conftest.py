"""
Pytest configuration and fixtures for backend tests.
"""
import os

# must be set before interview_coach.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("OPENROUTER_API_KEY", None)
os.environ.pop("FIREBASE_PROJECT_ID", None)

import pytest
from fastapi.testclient import TestClient

from interview_coach.main import create_app
from interview_coach.services.llm_service import ModelGateway
from interview_coach.store import SessionStore


class StubGateway(ModelGateway):
    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


class StubVerifier:
    """Accepts the tokens it knows and counts every call."""

    def __init__(self, tokens=None):
        self.tokens = tokens or {}
        self.calls = 0

    def verify(self, token):
        self.calls += 1
        if token not in self.tokens:
            raise ValueError("token rejected")
        return self.tokens[token]


@pytest.fixture
def gateway():
    return StubGateway()


@pytest.fixture
def verifier():
    return StubVerifier({"abc123": {"sub": "user-1", "uid": "user-1", "email": "user@example.com"}})


@pytest.fixture
def store(tmp_path):
    return SessionStore.from_url(f"sqlite:///{tmp_path / 'sessions.db'}")


@pytest.fixture
def client(gateway, verifier, store):
    return TestClient(create_app(model_gateway=gateway, verifier=verifier, store=store))


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer abc123"}
