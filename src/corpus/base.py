"""Corpus collaborator protocol.

The corpus supplies the messages to search and the lookup tables joined
into results. It is read-only from the engine's perspective.
"""

from typing import Protocol, runtime_checkable

from src.models.directory import Channel, Server, User
from src.models.message import Message


@runtime_checkable
class MessageCorpus(Protocol):
    """Protocol for message corpora.

    Corpora implement this protocol for structural subtyping -
    they don't need to inherit, just implement the methods.
    """

    async def fetch_messages(self) -> list[Message]:
        """Return a consistent (possibly stale) snapshot of all messages.

        Raises:
            CorpusUnavailable: If the snapshot cannot be read
        """
        ...

    async def lookup_user(self, user_id: str) -> User | None:
        """Return the user with this id, or None if unknown."""
        ...

    async def lookup_channel(self, channel_id: str) -> Channel | None:
        """Return the channel with this id, or None if unknown."""
        ...

    async def lookup_server(self, server_id: str) -> Server | None:
        """Return the server with this id, or None if unknown."""
        ...

    async def health_check(self) -> bool:
        """Check if the corpus can currently be read.

        Returns:
            True if healthy, False otherwise
        """
        ...
