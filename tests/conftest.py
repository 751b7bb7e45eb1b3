"""
Test configuration and fixtures for the hit stats service.
This centralizes all test setup, making individual tests clean.
"""

import itertools
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from main import app
from hits_app.database.connection import Base, get_db
from hits_app.services.hit_service import HitService
from hits_app.services.hit_validator import HitValidator

# Test database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def days_ago(days: int) -> date:
    return date.today() - timedelta(days=days)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    # Create tables
    Base.metadata.create_all(bind=engine)

    # Create session
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        # Cleanup
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_uniqueness_flag():
    """The flag is process-wide, never let a test leak it"""
    original = HitValidator.leave_uniqueness_check_to_db
    yield
    HitValidator.leave_uniqueness_check_to_db = original


@pytest.fixture
def hit_service(db_session):
    return HitService(db=db_session)


@pytest.fixture
def make_host(hit_service):
    """Get or create a host by name"""
    def _make_host(name: str = "www.example.com"):
        return hit_service.get_or_create_host(name)
    return _make_host


@pytest.fixture
def make_hit(hit_service, make_host):
    """
    Build (save=False) or create a hit.
    Defaults give every hit its own path so they never clash.
    """
    sequence = itertools.count(1)

    def _make_hit(save: bool = True, **attrs):
        fields = {
            "host": make_host(),
            "path": f"/path/{next(sequence)}",
            "http_status": "200",
            "count": 1,
            "hit_on": days_ago(1),
        }
        fields.update(attrs)
        hit = hit_service.build_hit(**fields)
        if save:
            hit_service.save(hit)
        return hit

    return _make_hit


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database dependency overridden.
    This is the main fixture that tests will use.
    """
    def override_get_db():
        yield db_session

    # Override the database dependency
    app.dependency_overrides[get_db] = override_get_db

    # Create test client
    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()
