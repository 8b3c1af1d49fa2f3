"""
Shared fixtures: an in-memory SQLite database per test and a few users.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["GOOGLE_GEMINI_API_KEY"] = "test-key"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from flashdeck import models  # noqa: F401
from flashdeck.core.cache import view_cache
from flashdeck.core.database import get_session
from flashdeck.core.security import CurrentUser
from flashdeck.models import User
from flashdeck.models.enums import Plan


def make_user(session: Session, username: str, plan: Plan = Plan.FREE) -> CurrentUser:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password=User.hash_password("secret123"),
        plan=plan.value
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return CurrentUser.from_user(user)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(autouse=True)
def clear_view_cache():
    view_cache.clear()
    yield
    view_cache.clear()


@pytest.fixture()
def alice(session) -> CurrentUser:
    return make_user(session, "alice")


@pytest.fixture()
def bob(session) -> CurrentUser:
    return make_user(session, "bob")


@pytest.fixture()
def pro_user(session) -> CurrentUser:
    return make_user(session, "paula", plan=Plan.PRO)


@pytest.fixture()
def client(engine):
    from flashdeck.main import app

    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()
