from __future__ import annotations

import os
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ["DB_URL"] = "sqlite:///./test.db"
    os.environ["ORM_DB_URL"] = "sqlite:///./test.db"
    os.environ["ORM_USE_MYSQL"] = "false"
    os.environ["STORAGE_BACKEND"] = "sql"
    os.environ["JWT_SECRET"] = "test-secret"

    # Ensure a local .env cannot leak into tests.
    os.environ["ENVIRONMENT"] = "test"


def reset_database() -> None:
    from roommatch.database import Base, engine

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture(params=["memory", "sql"])
def storage(request: pytest.FixtureRequest) -> Any:
    from roommatch.storage import MemoryStorage, SqlStorage

    if request.param == "memory":
        return MemoryStorage()

    from roommatch.database import SessionLocal

    reset_database()
    return SqlStorage(SessionLocal)


@pytest.fixture()
def memory_storage() -> Any:
    from roommatch.storage import MemoryStorage

    return MemoryStorage()


@pytest.fixture(params=["memory", "sql"])
def client(request: pytest.FixtureRequest) -> Any:
    from roommatch.main import create_app
    from roommatch.storage import MemoryStorage, SqlStorage

    if request.param == "memory":
        app = create_app(storage=MemoryStorage())
    else:
        from roommatch.database import SessionLocal

        reset_database()
        app = create_app(storage=SqlStorage(SessionLocal))

    with TestClient(app) as c:
        yield c


@pytest.fixture()
def signup(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Register + log in a user; returns its id, username and auth headers."""

    def _signup(username: str, password: str = "SecretPass123", **extra: Any) -> dict[str, Any]:
        r = client.post("/api/auth/register", json={"username": username, "password": password, **extra})
        assert r.status_code == 201, r.text
        user_id = r.json()["id"]
        r = client.post("/api/auth/login", json={"username": username, "password": password})
        assert r.status_code == 200, r.text
        token = r.json()["access_token"]
        return {"id": user_id, "username": username, "headers": {"Authorization": f"Bearer {token}"}}

    return _signup
