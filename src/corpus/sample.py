"""Development corpus mirroring the chat client's mock data.

Timestamps are relative to the moment the corpus is built, so the
ordering (msg5 newest, msg1 oldest) is stable while the absolute times
move with the clock.
"""

from datetime import UTC, datetime, timedelta

from src.corpus.memory import InMemoryCorpus
from src.models.directory import Channel, ChannelType, Server, User, UserStatus
from src.models.message import Attachment, Message

SERVER_ID = "server1"


def sample_servers() -> list[Server]:
    return [Server(id=SERVER_ID, name="My Server")]


def sample_channels() -> list[Channel]:
    return [
        Channel(id="1", name="general", type=ChannelType.TEXT, server_id=SERVER_ID, position=0),
        Channel(
            id="2",
            name="announcements",
            type=ChannelType.ANNOUNCEMENT,
            server_id=SERVER_ID,
            position=1,
        ),
        Channel(id="3", name="random", type=ChannelType.TEXT, server_id=SERVER_ID, position=2),
        Channel(id="4", name="help", type=ChannelType.TEXT, server_id=SERVER_ID, position=3),
    ]


def sample_users() -> list[User]:
    return [
        User(
            id="1",
            username="johndoe",
            display_name="John Doe",
            email="john@example.com",
            status=UserStatus.ONLINE,
        ),
        User(
            id="2",
            username="janedoe",
            display_name="Jane Doe",
            email="jane@example.com",
            status=UserStatus.IDLE,
        ),
        User(
            id="3",
            username="bobsmith",
            display_name="Bob Smith",
            email="bob@example.com",
            status=UserStatus.OFFLINE,
        ),
    ]


def sample_messages(now: datetime | None = None) -> list[Message]:
    """Build the five development messages.

    Args:
        now: Reference time (defaults to the current UTC time)
    """
    now = now or datetime.now(UTC)
    return [
        Message(
            id="msg1",
            content="Hey everyone! Welcome to the general channel.",
            author_id="1",
            channel_id="1",
            server_id=SERVER_ID,
            created_at=now - timedelta(hours=2),
        ),
        Message(
            id="msg2",
            content=(
                "Does anyone have the project files? I need to review them "
                "before the meeting tomorrow."
            ),
            author_id="2",
            channel_id="1",
            server_id=SERVER_ID,
            attachments=[
                Attachment(
                    id="att1",
                    url="https://example.com/file.pdf",
                    filename="project_spec.pdf",
                    content_type="application/pdf",
                    size=1024 * 1024,
                )
            ],
            created_at=now - timedelta(hours=1),
        ),
        Message(
            id="msg3",
            content="I've uploaded the design mockups to the shared folder.",
            author_id="3",
            channel_id="3",
            server_id=SERVER_ID,
            created_at=now - timedelta(minutes=30),
        ),
        Message(
            id="msg4",
            content=(
                "Important announcement: Server maintenance scheduled for "
                "tomorrow at 2 AM."
            ),
            author_id="1",
            channel_id="2",
            server_id=SERVER_ID,
            created_at=now - timedelta(minutes=15),
        ),
        Message(
            id="msg5",
            content="Can someone help me with the login issue? I keep getting an error.",
            author_id="2",
            channel_id="4",
            server_id=SERVER_ID,
            created_at=now - timedelta(minutes=5),
        ),
    ]


def sample_corpus(
    now: datetime | None = None, latency_seconds: float = 0.0
) -> InMemoryCorpus:
    """Build the development corpus."""
    return InMemoryCorpus(
        messages=sample_messages(now),
        users=sample_users(),
        channels=sample_channels(),
        servers=sample_servers(),
        latency_seconds=latency_seconds,
    )
