from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from quiz.main import create_app
from shared.auth import current_user
from shared.config import Settings
from shared.database import Base, make_engine, make_session_factory
from shared.models import User
from quiz import crud


def build_two_question_test() -> dict:
    """Q1 has correct option A, Q2 has correct option B."""
    return {
        "title": "Basics",
        "description": "two questions",
        "topic_id": 7,
        "questions": [
            {
                "text": "Q1",
                "options": [
                    {"text": "A", "is_correct": True},
                    {"text": "B", "is_correct": False},
                ],
            },
            {
                "text": "Q2",
                "options": [
                    {"text": "A", "is_correct": False},
                    {"text": "B", "is_correct": True},
                    {"text": "C", "is_correct": False},
                ],
            },
        ],
    }


def option_id(test, question_index: int, text: str) -> int:
    q = test.questions[question_index]
    return next(o.id for o in q.options if o.text == text)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'quiz.db'}",
        auth_service_url="http://auth.test",
        cors_origins=["*"],
        log_level="INFO",
        port=8004,
    )


@pytest.fixture
def SessionLocal(settings):
    engine = make_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)
    factory = make_session_factory(engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db(SessionLocal):
    session = SessionLocal()
    session.add_all([
        User(id=1, login="student1", role="student"),
        User(id=2, login="student2", role="student"),
        User(id=10, login="teacher", role="teacher"),
        User(id=20, login="admin", role="admin"),
    ])
    session.commit()
    yield session
    session.close()


@pytest.fixture
def sample_test(db):
    return crud.create_test(db, build_two_question_test())


@pytest.fixture
def app(settings, SessionLocal, db):
    return create_app(settings, SessionLocal=SessionLocal, enable_auth=False)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def login_as(app):
    def _login(role: str, user_id: int) -> None:
        app.dependency_overrides[current_user] = lambda: {"sub": str(user_id), "email": "", "role": role}

    yield _login
    app.dependency_overrides.clear()
