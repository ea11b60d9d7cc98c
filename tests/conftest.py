# tests/conftest.py
"""Shared fixtures: in-memory SQLite store, seeded directory data, API client, auth headers."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import configure_sqlite_locking, create_tables, get_db
from app.main import app
from app.models.department import Department
from app.models.division import Division
from app.models.public_user import PublicUser
from app.models.registry_entry import RegistryEntry
from app.utils.auth import create_access_token


@pytest.fixture
def db_engine():
    engine = configure_sqlite_locking(create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    ))
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def directory(db_session):
    """Two departments, one division each, one pre-registered public user."""
    now = datetime.now()
    db_session.add_all([
        Department(id=1, name="Registrar of Births", status="active", created_at=now),
        Department(id=2, name="Land Registry", status="active", created_at=now),
    ])
    db_session.flush()
    db_session.add_all([
        Division(id=1, department_id=1, name="Birth Certificates", status="active", created_at=now),
        Division(id=2, department_id=2, name="Deeds", status="active", created_at=now),
    ])
    db_session.flush()
    db_session.add(PublicUser(
        id=1, public_id="PUB00001", name="Nimal Perera", nic="851234567V",
        address="12 Temple Road, Kandy", phone="0771234567",
        department_id=1, status="active", created_at=now,
    ))
    db_session.commit()
    return db_session


@pytest.fixture
def add_entry(db_session):
    """Insert a registry entry row directly, bypassing the service."""
    def _add(registry_id, **fields):
        values = dict(
            registry_id=registry_id,
            visitor_name="A. Silva",
            visitor_nic="912345678V",
            department_id=1,
            purpose_of_visit="Birth certificate",
            visitor_type="new",
            status="active",
            entry_time=datetime.now(),
        )
        values.update(fields)
        entry = RegistryEntry(**values)
        db_session.add(entry)
        db_session.commit()
        return entry
    return _add


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def staff_token():
    return create_access_token(user_id=7, username="frontdesk", role="staff")


@pytest.fixture
def auth_headers(staff_token):
    return {"Authorization": f"Bearer {staff_token}"}
