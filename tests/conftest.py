import sqlite3
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tlearn.core import security
from tlearn.core.config import Settings
from tlearn.db.base import Base
from tlearn.db.session import create_engine, create_sessionmaker
from tlearn.main import create_app

TEST_SECRET = "test-secret-do-not-use-in-production"


@pytest.fixture(autouse=True)
def cheap_argon2(monkeypatch):
    # Same scheme, minimal work factors so the suite stays fast
    monkeypatch.setattr(
        security,
        "pwd_context",
        security.pwd_context.copy(
            argon2__time_cost=1,
            argon2__memory_cost=1024,
            argon2__parallelism=1,
        ),
    )


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "tlearn-test.db"


@pytest.fixture()
def settings(db_path: Path) -> Settings:
    return Settings(
        secret_key=TEST_SECRET,
        database_url=f"sqlite+aiosqlite:///{db_path}",
        _env_file=None,
    )


@pytest.fixture()
def client(settings: Settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture()
async def sessionmaker(settings: Settings):
    engine = create_engine(settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield create_sessionmaker(engine)
    await engine.dispose()


@pytest.fixture()
async def db(sessionmaker):
    async with sessionmaker() as session:
        yield session


# ---------- HTTP helpers ----------

def register(client: TestClient, username: str, password: str = "pw1", email: str | None = None):
    return client.post(
        "/auth/register",
        json={"username": username, "email": email or f"{username}@example.com", "password": password},
    )


def login_token(client: TestClient, username: str, password: str = "pw1") -> str:
    r = client.post("/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["token"]


def bearer(credential: str) -> dict:
    return {"Authorization": f"Bearer {credential}"}


def promote_to_admin(db_path: Path, username: str) -> None:
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("UPDATE users SET role = 'admin' WHERE username = ?", (username,))
        conn.commit()
    finally:
        conn.close()


@pytest.fixture()
def user_token(client: TestClient) -> str:
    assert register(client, "bob").status_code == 201
    return login_token(client, "bob")


@pytest.fixture()
def admin_token(client: TestClient, db_path: Path) -> str:
    assert register(client, "root", password="adminpw").status_code == 201
    promote_to_admin(db_path, "root")
    return login_token(client, "root", password="adminpw")
