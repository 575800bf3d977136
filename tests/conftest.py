import pytest

from study_buddy import create_app, runtime
from tests.fakes import FakeFirestore, ScriptedAI


@pytest.fixture()
def app(monkeypatch):
    monkeypatch.setenv("FLASK_ENV", "test")
    monkeypatch.setenv("FIREBASE_CREDENTIALS_PATH", "/nonexistent/firebase-credentials.json")
    for name in ("GEMINI_API_KEY", "OPENROUTER_API_KEY", "FIREBASE_CREDENTIALS", "SENTRY_DSN_BACKEND", "SENTRY_ENVIRONMENT", "CORS_ALLOWED_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    flask_app = create_app()
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture()
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def fake_db(app, monkeypatch):
    db = FakeFirestore()
    monkeypatch.setattr(runtime, "db", db)
    return db


@pytest.fixture()
def signed_in(app, monkeypatch):
    monkeypatch.setattr(runtime, "verify_firebase_token", lambda _request: {"uid": "u1", "email": "student@example.com"})
    return {"Authorization": "Bearer test-token"}


@pytest.fixture()
def scripted_ai(app, monkeypatch):
    def _install(*outcomes):
        ai = ScriptedAI(*outcomes)
        monkeypatch.setattr(runtime, "ai", ai)
        return ai
    return _install
