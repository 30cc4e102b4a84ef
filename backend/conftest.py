"""
Pytest configuration file for backend testing.
"""
import os
import sys
from pathlib import Path

# Settings are read on import; keep tests off the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("KDS_SEED_DEFAULT_STATIONS", "false")
os.environ.pop("AUDIT_SINK_URL", None)

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import Base, get_db, enable_sqlite_foreign_keys

# Import all models to register them with SQLAlchemy
import modules.loyalty.models  # noqa: F401
import modules.kds.models  # noqa: F401
from modules.loyalty.services.audit_sink import AuditSink, get_audit_sink
from tests.factories import bind_session


class RecordingAuditSink(AuditSink):
    """Keeps audit events in memory for assertions"""

    def __init__(self):
        self.events = []

    def _record(self, event):
        self.events.append(event)


@pytest.fixture
def test_engine():
    """Fresh in-memory SQLite database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(test_engine):
    """Create a database session for testing"""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    session = TestingSessionLocal()
    bind_session(session)
    try:
        yield session
    finally:
        bind_session(None)
        session.close()


@pytest.fixture
def audit_sink():
    return RecordingAuditSink()


@pytest.fixture
def client(db, audit_sink):
    """Test client bound to the test session and recording audit sink"""
    from app.main import app

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_audit_sink] = lambda: audit_sink

    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()
