# tests/conftest.py
"""Shared fixtures. Points the app at a throwaway SQLite file before anything imports settings."""

import sys
import os
import tempfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

_TMP = tempfile.mkdtemp(prefix="parking-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["LOG_DIR"] = os.path.join(_TMP, "logs")
os.environ["DEFAULT_CAPACITY"] = "5"
os.environ.pop("API_KEY", None)

import pytest
from parking_tracker.database import Base, engine, SessionLocal
import parking_tracker.models  # noqa


@pytest.fixture(autouse=True)
def clean_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
