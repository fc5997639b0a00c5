"""
Shared fixtures: an in-memory SQLite database per test, users of both roles,
and a TestClient wired to the same session.
"""

import os
from datetime import timedelta

# Configure before importing the application
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["USE_TASK_QUEUE"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kore_dibo.core.security import create_access_token
from kore_dibo.core.timeutils import utcnow
from kore_dibo.db.base import Base
from kore_dibo.db.session import get_db
from kore_dibo.main import app
from kore_dibo.models.user import User
from kore_dibo.schemas.assignment import AssignmentCreate
from kore_dibo.services import assignment_service

TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="function")
def db_session():
    """Create a test database session."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, username, role, **kwargs):
    user = User(
        username=username,
        email=f"{username}@example.com",
        # Pre-hashed password to avoid running bcrypt in tests
        password_hash="$2b$12$hashed_password_placeholder",
        full_name=kwargs.pop("full_name", username.title()),
        role=role,
        verified=kwargs.pop("verified", True),
        rating=0,
        review_count=0,
        **kwargs,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token(data={"sub": user.username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def student(db_session):
    return make_user(db_session, "sadia", "student")


@pytest.fixture
def other_student(db_session):
    return make_user(db_session, "rafi", "student")


@pytest.fixture
def helper_a(db_session):
    return make_user(db_session, "anika", "helper")


@pytest.fixture
def helper_b(db_session):
    return make_user(db_session, "babul", "helper")


def assignment_payload(**overrides):
    data = {
        "title": "Linear algebra problem set",
        "description": "Ten proofs on eigenvalues and diagonalisation.",
        "budget": 1000,
        "deadline": utcnow() + timedelta(days=7),
        "category": "Mathematics",
    }
    data.update(overrides)
    return data


@pytest.fixture
def assignment(db_session, student):
    return assignment_service.create_assignment(
        db_session, student=student, obj_in=AssignmentCreate(**assignment_payload())
    )
