"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import asyncio
import os

# ---------------------------------------------------------------------------
# Ensure a valid JWT_SECRET is always set for test runs.
# This must happen before any import of botlist.api.deps which validates
# the secret at module-load time.
# ---------------------------------------------------------------------------
_TEST_JWT_SECRET = "test-secret-for-pytest-only-" + "x" * 40  # > 32 chars
os.environ.setdefault("JWT_SECRET", _TEST_JWT_SECRET)

from datetime import UTC, datetime, timedelta  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402

# ---------------------------------------------------------------------------
# Make JSONB columns work in SQLite for testing.
# SQLite doesn't support JSONB natively, but SQLAlchemy's JSON type works.
# We register a custom type compiler so SQLite renders JSONB as TEXT.
# ---------------------------------------------------------------------------
from sqlalchemy.dialects.postgresql import JSONB as PG_JSONB  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from botlist.config import DirectoryConfig  # noqa: E402
from botlist.database.models import Base, Bot, BotStatus, User  # noqa: E402
from botlist.engine.cache import TTLCache  # noqa: E402
from botlist.services.enrichment_service import EnrichmentClient  # noqa: E402
from botlist.services.notification_service import NotificationDispatcher  # noqa: E402

_jsonb_sqlite_registered = False


def _register_jsonb_sqlite_compat():
    """Register SQLite compilation for PG JSONB type (idempotent)."""
    global _jsonb_sqlite_registered
    if _jsonb_sqlite_registered:
        return
    from sqlalchemy.ext.compiler import compiles

    @compiles(PG_JSONB, "sqlite")
    def _compile_jsonb_as_text(type_, compiler, **kw):
        return "TEXT"

    _jsonb_sqlite_registered = True


_register_jsonb_sqlite_compat()


# ---------------------------------------------------------------------------
# Async helper (no pytest-asyncio)
# ---------------------------------------------------------------------------
def run_async(coro):
    """Run an async coroutine in a fresh event loop."""
    return asyncio.run(coro)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------
@pytest.fixture
def db_engine() -> Engine:
    """Create an in-memory SQLite engine with all botlist tables.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` used in ``run_db``).
    """
    from sqlalchemy.pool import StaticPool

    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


def add_user(engine: Engine, discord_id: str, *roles: str, username: str | None = None) -> None:
    """Insert a ``users`` row holding *roles*."""
    with Session(engine) as session:
        session.add(User(discord_id=discord_id, username=username, roles=list(roles)))
        session.commit()


_BASE_TIME = datetime(2026, 1, 1, tzinfo=UTC)


def add_bot(
    engine: Engine,
    client_id: str,
    *,
    owner_id: str = "owner-1",
    name: str | None = None,
    description: str = "A helpful bot",
    status: str = BotStatus.APPROVED,
    tags: list[str] | None = None,
    votes: int = 0,
    servers: int = 0,
    featured: bool = False,
    age_minutes: int = 0,
) -> None:
    """Insert a listing directly.  Larger *age_minutes* means older."""
    created = _BASE_TIME - timedelta(minutes=age_minutes)
    bot = Bot(
        client_id=client_id,
        owner_id=owner_id,
        owner_username="Owner",
        name=name or f"Bot {client_id}",
        discriminator="0000",
        description=description,
        long_description="Longer text about the bot.",
        prefix="!",
        status=status,
        featured=featured,
        votes=votes,
        servers=servers,
        created_at=created,
        updated_at=created,
    )
    bot.set_tags(tags or [])
    with Session(engine) as session:
        session.add(bot)
        session.commit()


def get_bot_row(engine: Engine, client_id: str) -> Bot | None:
    with Session(engine, expire_on_commit=False) as session:
        bot = session.get(Bot, client_id)
        if bot is not None:
            _ = bot.tag_rows
        return bot


# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------
class RecordingNotifier(NotificationDispatcher):
    """Dispatcher that records events instead of posting them."""

    def __init__(self) -> None:
        super().__init__("https://discord.invalid/api/webhooks/test")
        self.events = []

    def dispatch(self, event):
        self.events.append(event)
        return None


def make_enrichment(handler=None, ttl: float = 3600, clock=None) -> EnrichmentClient:
    """EnrichmentClient backed by ``httpx.MockTransport``.

    The default handler answers 404 for every bot (no enrichment data).
    """
    if handler is None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error": "not found"})

    cache = TTLCache(ttl, clock=clock) if clock else TTLCache(ttl)
    return EnrichmentClient(
        "https://enrichment.test",
        cache,
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def enrichment() -> EnrichmentClient:
    return make_enrichment()


@pytest.fixture
def directory_config() -> DirectoryConfig:
    return DirectoryConfig(site_name="Test Bot List", default_page_limit=20, max_page_limit=50)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
def make_token(sub: str = "12345", username: str = "Tester", is_admin: bool = False) -> str:
    """Create a signed JWT.  Usable as both a fixture helper and a factory."""
    import jwt

    from botlist.api.deps import JWT_ALGORITHM, JWT_SECRET

    return jwt.encode(
        {"sub": sub, "username": username, "is_admin": is_admin},
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )


def auth_header(sub: str = "12345", username: str = "Tester", is_admin: bool = False) -> dict:
    return {"Authorization": f"Bearer {make_token(sub, username, is_admin)}"}


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------
@pytest.fixture
def client(db_engine, notifier, enrichment, directory_config):
    """FastAPI TestClient wired to the in-memory store and fakes."""
    from fastapi.testclient import TestClient

    from botlist.api import deps
    from botlist.api.main import app

    app.dependency_overrides[deps.get_engine] = lambda: db_engine
    app.dependency_overrides[deps.get_config] = lambda: directory_config
    app.dependency_overrides[deps.get_enrichment_client] = lambda: enrichment
    app.dependency_overrides[deps.get_notifier] = lambda: notifier
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
