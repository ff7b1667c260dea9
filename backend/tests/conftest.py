import os

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-do-not-use"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["CREATE_SCHEMA_ON_STARTUP"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import db
from app.core.context import RequestContext
from app.core.security import hash_password
from app.db.base import Base
from app.main import app
from app.models.todo import Todo
from app.models.user import User
from app.repositories.todos import TodoRepository
from app.repositories.users import UserRepository
from app.seed import seed

ADMIN_ID = 1
USER_ID = 2


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture()
def session(session_factory):
    s = session_factory()
    try:
        seed(s)
        yield s
    finally:
        s.close()


@pytest.fixture()
def users(session):
    return UserRepository(session)


@pytest.fixture()
def todos(session):
    return TodoRepository(session)


@pytest.fixture()
def admin_ctx():
    return RequestContext(correlation_id=11111, caller_id=ADMIN_ID, is_admin=True)


@pytest.fixture()
def user_ctx():
    return RequestContext(correlation_id=22222, caller_id=USER_ID, is_admin=False)


@pytest.fixture()
def client(session, session_factory):
    def override_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[db] = override_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def login(client: TestClient, username: str, password: str) -> dict:
    res = client.post("/api/auth/login", json={"username": username, "password": password})
    assert res.status_code == 201, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


@pytest.fixture()
def admin_headers(client):
    return login(client, "admin", "admin")


@pytest.fixture()
def user_headers(client):
    return login(client, "user", "user")


@pytest.fixture()
def make_todo(session):
    def _make(owner_id: int, title: str = "Write the report", is_closed: bool = False) -> Todo:
        t = Todo(title=title, description=None, is_closed=is_closed, created_by_id=owner_id, updated_by_id=owner_id)
        session.add(t)
        session.commit()
        session.refresh(t)
        return t

    return _make


@pytest.fixture()
def make_user(session):
    def _make(username: str, is_admin: bool = False) -> User:
        u = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password("Passw0rd!"),
            is_admin=is_admin,
            created_by_id=0,
            updated_by_id=0,
        )
        session.add(u)
        session.commit()
        session.refresh(u)
        return u

    return _make


@pytest.fixture()
def login_as(client):
    return lambda username, password: login(client, username, password)
