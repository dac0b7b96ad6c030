"""
Shared fixtures: in-memory SQLite database, app with overridden dependencies,
scripted provider clients and authenticated users.
"""

import os

# Must be set before examgen.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["GEMINI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from examgen.auth.security import create_user_token, hash_password
from examgen.database import crud
from examgen.database.database import Base, get_db
from examgen.generation.question_generator import QuestionGenerator


# ====================
# Provider stubs
# ====================

class ScriptedClient:
    """Completion client that replays canned responses (or raises canned errors) in order."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    async def complete(self, model, prompt):
        self.calls.append((model, prompt))
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    @property
    def models_called(self):
        return [model for model, _ in self.calls]


@pytest.fixture
def scripted_client():
    return ScriptedClient


# ====================
# Database
# ====================

@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


# ====================
# App
# ====================

@pytest.fixture
def app(session_factory):
    from examgen.main import app as fastapi_app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.state.question_generator = None
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()
    fastapi_app.state.question_generator = None


@pytest.fixture
def client(app):
    # No context manager: the lifespan (real DB, Gemini client) stays out of tests
    return TestClient(app)


@pytest.fixture
def install_generator(app):
    """Put a QuestionGenerator backed by the given client where the app looks for it."""

    def _install(completion_client, models=("model-a", "model-b", "model-c")):
        generator = QuestionGenerator(completion_client, models=list(models))
        app.state.question_generator = generator
        return generator

    return _install


# ====================
# Users
# ====================

@pytest.fixture
def make_user(db_session):
    def _make(email, role="student", password="secret123", name="Test User"):
        return crud.create_user(
            db_session,
            email=email,
            hashed_password=hash_password(password),
            name=name,
            role=role,
        )

    return _make


@pytest.fixture
def student(make_user):
    return make_user("student@example.com", role="student", name="Stu Dent")


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", role="admin", name="Ad Min")


def bearer(user):
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def student_headers(student):
    return bearer(student)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)
