"""Test configuration and fixtures"""

import json
import time
import uuid
from typing import List, Optional, Tuple

import pytest
from httpx import ASGITransport, AsyncClient
from nacl.signing import SigningKey
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.commands import CommandContext
from app.database import Base, get_db, get_session_factory
from app.discord.client import get_discord_client
from app.llm import BaseTextProvider, get_text_provider
from app.models.restaurant import City, Restaurant
from app.schemas.audit import Actor
from app.schemas.discord import ChannelType
from app.webhooks.discord import get_public_key


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_ACTOR = Actor(name="tester", id=123456789012345678)
TEST_CHANNEL_ID = "900000000000000001"


class FakeDiscordClient:
    """Records REST calls instead of sending them"""

    def __init__(self):
        self.edits: List[Tuple[str, str]] = []
        self.threads: List[Tuple[str, str]] = []
        self.messages: List[Tuple[str, str]] = []

    async def edit_original_response(self, interaction_token: str, content: str):
        self.edits.append((interaction_token, content))
        return {"content": content}

    async def create_thread(self, channel_id: str, name: str) -> dict:
        self.threads.append((channel_id, name))
        return {"id": "910000000000000001", "name": name}

    async def send_message(self, channel_id: str, content: str) -> dict:
        self.messages.append((channel_id, content))
        return {"id": "920000000000000001", "content": content}


class FakeTextProvider(BaseTextProvider):
    """Canned text generation"""

    def __init__(self, answer: str = "Try the falafel."):
        super().__init__("fake")
        self.answer = answer
        self.prompts: List[str] = []

    async def generate_response(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answer


@pytest.fixture
async def session_factory():
    """
    Session factory over a fresh in-memory database.

    Every session shares the one StaticPool connection, so two sessions
    must not hold open transactions at the same time.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite defers BEGIN until the first DML, which breaks SAVEPOINT.
    # Hand transaction control to SQLAlchemy instead.
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_db(session_factory):
    """Create test database session"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_discord():
    return FakeDiscordClient()


@pytest.fixture
def fake_text_provider():
    return FakeTextProvider()


@pytest.fixture
def command_context(test_db, fake_discord, fake_text_provider):
    """Context for a command run from a guild text channel"""
    return CommandContext(
        db=test_db,
        actor=TEST_ACTOR,
        channel_id=TEST_CHANNEL_ID,
        channel_type=ChannelType.GUILD_TEXT,
        discord=fake_discord,
        text_provider=fake_text_provider,
    )


@pytest.fixture
async def test_restaurants(test_db):
    """A few restaurants in both cities"""
    restaurants = [
        Restaurant(id=uuid.uuid4(), name="Zamn", city=City.RAMALLAH, url="https://zamn.ps"),
        Restaurant(id=uuid.uuid4(), name="Pronto", city=City.RAMALLAH),
        Restaurant(id=uuid.uuid4(), name="Pizza House", city=City.RAMALLAH),
        Restaurant(id=uuid.uuid4(), name="Abu Salha", city=City.NABLUS, url="https://abusalha.ps"),
        Restaurant(id=uuid.uuid4(), name="Pizza Inn", city=City.NABLUS),
    ]

    for restaurant in restaurants:
        test_db.add(restaurant)

    await test_db.commit()
    return restaurants


@pytest.fixture
def signing_key():
    return SigningKey.generate()


@pytest.fixture
async def client(test_db, session_factory, fake_discord, fake_text_provider, signing_key):
    """Create test client with overridden collaborators"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_discord_client] = lambda: fake_discord
    app.dependency_overrides[get_text_provider] = lambda: fake_text_provider
    app.dependency_overrides[get_public_key] = lambda: signing_key.verify_key.encode().hex()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


def signed_headers(signing_key: SigningKey, body: bytes, timestamp: Optional[str] = None) -> dict:
    """Headers Discord would send for this body"""
    timestamp = timestamp or str(int(time.time()))
    signature = signing_key.sign(timestamp.encode() + body).signature.hex()
    return {
        "X-Signature-Ed25519": signature,
        "X-Signature-Timestamp": timestamp,
        "Content-Type": "application/json",
    }


def interaction_body(
    interaction_type: int,
    command: Optional[str] = None,
    options: Optional[list] = None,
    channel_type: int = ChannelType.GUILD_TEXT.value,
) -> bytes:
    """Serialized interaction payload in the shape Discord posts"""
    payload = {
        "id": "800000000000000001",
        "application_id": "700000000000000001",
        "type": interaction_type,
        "token": "interaction-token",
        "guild_id": "600000000000000001",
        "channel_id": TEST_CHANNEL_ID,
        "channel": {"id": TEST_CHANNEL_ID, "type": channel_type},
        "member": {"user": {"id": str(TEST_ACTOR.id), "username": TEST_ACTOR.name}},
    }
    if command is not None:
        payload["data"] = {"id": "500000000000000001", "name": command, "type": 1, "options": options or []}
    return json.dumps(payload).encode()


@pytest.fixture
def post_interaction(client, signing_key):
    """Post a signed interaction to the webhook"""
    async def post(interaction_type: int, command: Optional[str] = None, options: Optional[list] = None, **kwargs):
        body = interaction_body(interaction_type, command, options, **kwargs)
        return await client.post("/interactions", content=body, headers=signed_headers(signing_key, body))

    return post


@pytest.fixture
def make_interaction():
    return interaction_body


@pytest.fixture
def sign(signing_key):
    """Sign a body with the test application key"""
    def _sign(body: bytes) -> dict:
        return signed_headers(signing_key, body)

    return _sign
