"""In-memory corpus backed by fixed record lists.

Used for development, tests, and file-backed deployments. An optional
latency simulates a remote backend.
"""

import asyncio
import json
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, ValidationError

from src.models.directory import Channel, Server, User
from src.models.message import Message
from src.search.errors import CorpusUnavailable

logger = structlog.get_logger()


class CorpusSnapshot(BaseModel):
    """Serialized corpus: the layout of a corpus JSON file."""

    servers: list[Server] = Field(default_factory=list)
    channels: list[Channel] = Field(default_factory=list)
    users: list[User] = Field(default_factory=list)
    messages: list[Message] = Field(default_factory=list)


class InMemoryCorpus:
    """Corpus serving records held in memory.

    Messages are append-only: add_message never replaces an existing id.
    """

    def __init__(
        self,
        messages: list[Message] | None = None,
        users: list[User] | None = None,
        channels: list[Channel] | None = None,
        servers: list[Server] | None = None,
        latency_seconds: float = 0.0,
    ):
        """Initialize the corpus.

        Args:
            messages: Initial messages
            users: Known users
            channels: Known channels
            servers: Known servers
            latency_seconds: Delay applied to every fetch
        """
        self._messages: list[Message] = list(messages or [])
        self._users = {u.id: u for u in users or []}
        self._channels = {c.id: c for c in channels or []}
        self._servers = {s.id: s for s in servers or []}
        self._latency = latency_seconds

    @classmethod
    def from_snapshot(
        cls, snapshot: CorpusSnapshot, latency_seconds: float = 0.0
    ) -> "InMemoryCorpus":
        """Build a corpus from a parsed snapshot."""
        return cls(
            messages=snapshot.messages,
            users=snapshot.users,
            channels=snapshot.channels,
            servers=snapshot.servers,
            latency_seconds=latency_seconds,
        )

    @classmethod
    def from_file(cls, path: Path, latency_seconds: float = 0.0) -> "InMemoryCorpus":
        """Load a corpus from a JSON file.

        Args:
            path: File containing {servers, channels, users, messages}
            latency_seconds: Delay applied to every fetch

        Raises:
            CorpusUnavailable: If the file is missing or malformed
        """
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            snapshot = CorpusSnapshot.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise CorpusUnavailable(f"Failed to load corpus from {path}: {e}") from e

        logger.info(
            "corpus loaded",
            path=str(path),
            messages=len(snapshot.messages),
            users=len(snapshot.users),
            channels=len(snapshot.channels),
        )
        return cls.from_snapshot(snapshot, latency_seconds=latency_seconds)

    def add_message(self, message: Message) -> bool:
        """Append a message.

        Returns:
            False if a message with the same id already exists
        """
        if any(m.id == message.id for m in self._messages):
            return False
        self._messages.append(message)
        return True

    async def fetch_messages(self) -> list[Message]:
        if self._latency > 0:
            await asyncio.sleep(self._latency)
        return list(self._messages)

    async def lookup_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    async def lookup_channel(self, channel_id: str) -> Channel | None:
        return self._channels.get(channel_id)

    async def lookup_server(self, server_id: str) -> Server | None:
        return self._servers.get(server_id)

    async def health_check(self) -> bool:
        return True

    def __len__(self) -> int:
        """Return number of messages in the corpus."""
        return len(self._messages)
