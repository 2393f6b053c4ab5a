"""
Shared pytest fixtures for database and API tests.

Each test gets its own in-memory SQLite database; the application's get_db
dependency is overridden to use it.
"""

import os

# Keep the module-level engine off the filesystem during tests.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from typing import Any, Callable, Dict, Generator, List, Tuple

import pytest
from langchain_core.runnables import RunnableLambda
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from database import repository


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def website_project(db_session):
    return repository.create_project(
        db_session,
        name="Acme",
        project_type="website",
        url="https://acme.example",
        description="Marketing site",
    )


@pytest.fixture
def codebase_project(db_session):
    return repository.create_project(db_session, name="Backend", project_type="codebase")


@pytest.fixture
def sample_analysis() -> Dict[str, Any]:
    """Structured output as the LLM would return it."""
    return {
        "functions": [
            {
                "name": "processUserData",
                "description": "Normalizes a user record",
                "parameters": {"userData": "object"},
                "return_type": "object",
                "line_number": 2,
                "complexity_score": 3,
                "insights": ["Lower-cases email addresses"],
                "suggestions": ["Validate the id field"],
            },
            {
                "name": "saveToDatabase",
                "description": "Persists a user",
                "parameters": {"data": "object"},
                "complexity_score": 5,
                "insights": [],
                "suggestions": ["Add retries"],
            },
        ]
    }


@pytest.fixture
def fake_llm_factory() -> Callable[..., Tuple[RunnableLambda, List[Any]]]:
    """
    Build a stand-in for ``llm.with_structured_output(...)``.

    Returns the runnable and the list of prompts it has received. The runnable
    answers with ``result`` (or raises ``error``).
    """
    def factory(result: Any = None, error: Exception = None) -> Tuple[RunnableLambda, List[Any]]:
        calls: List[Any] = []

        def respond(prompt_value):
            calls.append(prompt_value)
            if error is not None:
                raise error
            return result

        return RunnableLambda(respond), calls

    return factory


@pytest.fixture
def app(session_factory):
    from main import app as fastapi_app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)
