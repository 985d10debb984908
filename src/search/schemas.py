"""Schemas for search output and session snapshots.

These are read models: the engine produces them for consumers and
never persists them.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.models.directory import Channel, Server, User
from src.models.message import Message
from src.search.filters import SearchFilters


class SearchResult(Message):
    """A message enriched with denormalized display names."""

    author: User | None = Field(default=None, description="Resolved author")
    channel_name: str | None = Field(default=None, description="Channel display name")
    server_name: str | None = Field(default=None, description="Server display name")


class Directory(BaseModel):
    """Snapshot of lookup entities resolved for one search.

    Unknown ids resolve to None rather than raising.
    """

    model_config = ConfigDict(frozen=True)

    users: dict[str, User] = Field(default_factory=dict)
    channels: dict[str, Channel] = Field(default_factory=dict)
    servers: dict[str, Server] = Field(default_factory=dict)

    def user(self, user_id: str) -> User | None:
        return self.users.get(user_id)

    def channel(self, channel_id: str) -> Channel | None:
        return self.channels.get(channel_id)

    def server(self, server_id: str | None) -> Server | None:
        if server_id is None:
            return None
        return self.servers.get(server_id)


class SearchStatus(str, Enum):
    """Lifecycle status of a search session."""

    IDLE = "idle"
    SEARCHING = "searching"
    SUCCESS = "success"
    ERROR = "error"


class SearchOutcome(str, Enum):
    """How a completed search was handled by its session.

    STALE means the search was superseded and its result discarded; it
    is bookkeeping, not an error, and produces no state change.
    """

    APPLIED = "applied"
    STALE = "stale"


class SessionError(BaseModel):
    """Error payload exposed on a session in the error state."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(description="Machine-readable error kind")
    message: str = Field(description="Human-readable description")


class SessionState(BaseModel):
    """Read-only snapshot of a search session."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    session_id: str = Field(description="Session identifier")
    sequence: int = Field(ge=0, description="Most recently issued sequence number")
    status: SearchStatus = Field(default=SearchStatus.IDLE)
    query: str = Field(default="", description="Last issued raw query")
    filters: SearchFilters = Field(default_factory=SearchFilters)
    results: list[SearchResult] = Field(
        default_factory=list,
        description="Results of the last successful search",
    )
    error: SessionError | None = Field(default=None)
