"""Pytest configuration: one fresh SQLite database per test.

``main`` creates its tables at import time against ``DATABASE_URL``; we point
that at a throwaway file before anything imports it, then give every test its
own file-backed database (several sessions must share state, which in-memory
SQLite does not do per connection) and route the app's ``get_db`` dependency
to it.
"""

import os
import tempfile
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(tempfile.mkdtemp(), "import.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from database.database import get_db, init_db, make_engine


@pytest.fixture
def engine(tmp_path: Path):
    engine = make_engine(f"sqlite:///{tmp_path / 'finance.db'}")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    from main import app

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
