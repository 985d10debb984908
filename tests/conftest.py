"""Pytest configuration and fixtures."""

import asyncio
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from src.config import Settings
from src.corpus.memory import InMemoryCorpus
from src.events.bus import EventBus
from src.main import app
from src.models.directory import Channel, Server, User
from src.models.message import Attachment, Message
from src.search.registry import SessionRegistry

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


def scenario_messages() -> list[Message]:
    """The five-message corpus: msg1 oldest, msg5 newest."""
    return [
        Message(
            id="msg1",
            content="Hey everyone! Welcome to the general channel.",
            author_id="1",
            channel_id="general",
            server_id="server1",
            created_at=NOW - timedelta(hours=2),
        ),
        Message(
            id="msg2",
            content="Does anyone have the project files? I need to review them.",
            author_id="2",
            channel_id="general",
            server_id="server1",
            attachments=[
                Attachment(
                    id="att1",
                    url="https://example.com/file.pdf",
                    filename="project_spec.pdf",
                    content_type="application/pdf",
                    size=1024 * 1024,
                )
            ],
            created_at=NOW - timedelta(hours=1),
        ),
        Message(
            id="msg3",
            content="I've uploaded the design mockups to the shared folder.",
            author_id="3",
            channel_id="random",
            server_id="server1",
            created_at=NOW - timedelta(minutes=30),
        ),
        Message(
            id="msg4",
            content="Important announcement: Server maintenance scheduled for tomorrow.",
            author_id="1",
            channel_id="announcements",
            server_id="server1",
            created_at=NOW - timedelta(minutes=15),
        ),
        Message(
            id="msg5",
            content="Can someone help me with the login issue? I keep getting an error.",
            author_id="2",
            channel_id="help",
            server_id="server1",
            created_at=NOW - timedelta(minutes=5),
        ),
    ]


def scenario_users() -> list[User]:
    return [
        User(id="1", username="johndoe", display_name="John Doe"),
        User(id="2", username="janedoe", display_name="Jane Doe"),
        User(id="3", username="bobsmith", display_name="Bob Smith"),
    ]


def scenario_channels() -> list[Channel]:
    return [
        Channel(id=name, name=name, server_id="server1", position=i)
        for i, name in enumerate(["general", "announcements", "random", "help"])
    ]


def build_scenario_corpus() -> InMemoryCorpus:
    return InMemoryCorpus(
        messages=scenario_messages(),
        users=scenario_users(),
        channels=scenario_channels(),
        servers=[Server(id="server1", name="My Server")],
    )


class GatedCorpus(InMemoryCorpus):
    """Corpus whose fetches block until the test releases them.

    Each fetch_messages call registers a gate; release(i) completes the
    i-th fetch and fail(i, exc) makes it raise. Lets tests complete
    fetches in any order.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.gates: list[asyncio.Future] = []

    async def fetch_messages(self) -> list[Message]:
        gate = asyncio.get_running_loop().create_future()
        self.gates.append(gate)
        await gate
        return await super().fetch_messages()

    def release(self, index: int) -> None:
        self.gates[index].set_result(None)

    def fail(self, index: int, exc: Exception) -> None:
        self.gates[index].set_exception(exc)

    async def wait_for_fetches(self, count: int) -> None:
        """Yield to the loop until count fetches are waiting."""
        for _ in range(100):
            if len(self.gates) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} fetches, got {len(self.gates)}")


@pytest.fixture
def corpus() -> InMemoryCorpus:
    """Five-message scenario corpus."""
    return build_scenario_corpus()


@pytest.fixture
def gated_corpus() -> GatedCorpus:
    """Scenario corpus with test-controlled fetch completion."""
    return GatedCorpus(
        messages=scenario_messages(),
        users=scenario_users(),
        channels=scenario_channels(),
        servers=[Server(id="server1", name="My Server")],
    )


@pytest.fixture
def test_settings() -> Settings:
    """Settings with debounce disabled and a small session cap."""
    return Settings(search_debounce_ms=0, max_sessions=3, search_timeout_seconds=None)


@pytest.fixture
async def client(
    corpus: InMemoryCorpus, test_settings: Settings
) -> AsyncIterator[AsyncClient]:
    """Create async test client for FastAPI app with the scenario corpus."""
    registry = SessionRegistry(corpus, test_settings, bus=EventBus())

    # Set up app state
    app.state.corpus = corpus
    app.state.session_registry = registry

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Cleanup
    await registry.close_all()
    del app.state.corpus
    del app.state.session_registry
