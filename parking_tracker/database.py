# parking_tracker/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy; SQLite by default, PostgreSQL when DATABASE_URL points there.
The snapshot slot table is the durable key-value store for the registry.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from parking_tracker.config import settings


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # Requests may be served from a worker thread other than the creator
        return {"connect_args": {"check_same_thread": False}, "echo": False}
    return {
        "pool_pre_ping": True,       # Auto-reconnect if DB connection drops
        "pool_size": 5,
        "max_overflow": 10,
        "echo": False,               # Set True to log all SQL queries (debug only)
    }


engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from parking_tracker.models.snapshot_slot import SnapshotSlot   # noqa

    Base.metadata.create_all(bind=engine)
