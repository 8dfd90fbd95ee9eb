import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

from core.database import build_engine, get_session
from core.security import create_token_for_account
from main import app
from models.models import PlanName, UserRole
from services import account_service

PASSWORD = "pw123456"


@pytest.fixture(name="engine")
def engine_fixture():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(engine):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def user(session):
    return account_service.create_account(session, "alice@example.com", PASSWORD, "Alice")


@pytest.fixture
def admin_user(session):
    return account_service.create_account(
        session,
        "root@example.com",
        PASSWORD,
        "Root",
        plan=PlanName.PRO,
        role=UserRole.ADMIN,
    )


@pytest.fixture
def separate_admin(session):
    return account_service.create_admin(session, "ops@example.com", PASSWORD, "Ops")


@pytest.fixture
def user_headers(user):
    return {"Authorization": f"Bearer {create_token_for_account(user)}"}


@pytest.fixture
def admin_headers(admin_user):
    return {"Authorization": f"Bearer {create_token_for_account(admin_user)}"}
