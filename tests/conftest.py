import os
import tempfile
from pathlib import Path
from typing import Iterator

# Keep the application database out of the working tree during tests.
_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="codequiz-tests-"))
os.environ.setdefault("DB_DIR", str(_TEST_DB_DIR))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TEST_DB_DIR / 'codequiz.db'}")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session as DbSession, sessionmaker

import codequiz.models.db  # noqa: F401
from codequiz.app import app
from codequiz.database import Base, get_db
from codequiz.dependencies import get_ai_service, get_result_store
from codequiz.services.result_service import ResultStore
from codequiz.services.session_registry import SessionRegistry, get_session_registry
from factories import FakeAIService


@pytest.fixture
def session_factory(tmp_path: Path) -> sessionmaker[DbSession]:
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def result_store(session_factory: sessionmaker[DbSession]) -> ResultStore:
    return ResultStore(session_factory)


@pytest.fixture
def fake_ai() -> FakeAIService:
    return FakeAIService()


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def client(
    session_factory: sessionmaker[DbSession],
    result_store: ResultStore,
    fake_ai: FakeAIService,
    registry: SessionRegistry,
) -> Iterator[TestClient]:
    def _get_db() -> Iterator[DbSession]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_result_store] = lambda: result_store
    app.dependency_overrides[get_ai_service] = lambda: fake_ai
    app.dependency_overrides[get_session_registry] = lambda: registry
    try:
        # Not used as a context manager: startup would touch the real database.
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
