"""Reference entities joined into search results for display.

Users, channels and servers are read-only lookup tables keyed by id.
"""

from enum import Enum

from pydantic import Field

from src.models.base import Record


class UserStatus(str, Enum):
    """Presence status of a user."""

    ONLINE = "online"
    OFFLINE = "offline"
    IDLE = "idle"
    DND = "dnd"
    INVISIBLE = "invisible"


class ChannelType(str, Enum):
    """Kind of channel."""

    TEXT = "text"
    VOICE = "voice"
    ANNOUNCEMENT = "announcement"


class User(Record):
    """A message author."""

    username: str = Field(description="Unique handle")
    display_name: str = Field(description="Name shown next to messages")
    email: str | None = Field(default=None)
    avatar: str | None = Field(default=None)
    status: UserStatus | None = Field(default=None)


class Channel(Record):
    """A channel within a server."""

    name: str = Field(description="Channel name without the leading '#'")
    type: ChannelType = Field(default=ChannelType.TEXT)
    server_id: str | None = Field(default=None, description="Owning server")
    position: int = Field(default=0, description="Sort position in the channel list")


class Server(Record):
    """A server (community) that owns channels."""

    name: str = Field(description="Server display name")
    description: str | None = Field(default=None)
