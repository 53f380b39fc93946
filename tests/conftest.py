import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Avant tout import de l'app : engine et settings lisent l'environnement
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["OPENAI_API_KEY"] = ""
os.environ["RATE_LIMIT_ENABLED"] = "false"

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from veille_ia.api.deps import get_report_generator
from veille_ia.core.rate_limit import rate_limiter
from veille_ia.db.base import Base
from veille_ia.db.session import get_db
from veille_ia.main import app
from veille_ia.models import UserSession
from veille_ia.services.report_generator import ReportGenerator


class FakeCompletionClient:
    """Remplace OpenAI : renvoie `reply` ou lève `error`, et garde les prompts reçus."""

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def complete(self, system: str, prompt: str) -> str:
        self.calls.append((system, prompt))
        if self.error is not None:
            raise self.error
        return self.reply


def seed_sessions(db_path: Path) -> None:
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)

    now = datetime.now(timezone.utc)
    with Session(engine) as s:
        s.add_all(
            [
                UserSession(id="s-alice", token="token-alice", user_id="user-alice", expires_at=now + timedelta(days=1)),
                UserSession(id="s-bob", token="token-bob", user_id="user-bob", expires_at=now + timedelta(days=1)),
                UserSession(id="s-old", token="token-expired", user_id="user-alice", expires_at=now - timedelta(minutes=1)),
            ]
        )
        s.commit()
    engine.dispose()


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "veille.db"
    seed_sessions(path)
    return path


@pytest.fixture()
def ai() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture()
def client(db_path: Path, ai: FakeCompletionClient):
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_report_generator] = lambda: ReportGenerator(
        api_key="sk-test", client_factory=lambda key: ai
    )
    rate_limiter.reset()

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
    rate_limiter.reset()


@pytest.fixture()
def alice() -> dict:
    return {"Authorization": "Bearer token-alice"}


@pytest.fixture()
def bob() -> dict:
    return {"Authorization": "Bearer token-bob"}


@pytest.fixture()
def make_veille(client, alice):
    def _make(headers=None, **fields):
        body = {"titre": "Veille IA", "sujet": "Intelligence artificielle"}
        body.update(fields)
        res = client.post("/veille", json=body, headers=headers or alice)
        assert res.status_code == 201, res.text
        return res.json()

    return _make
