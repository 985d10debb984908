"""Base Event class for all session events."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class Event(BaseModel):
    """Base class for all session events.

    Events are immutable records of visible search session transitions.

    Attributes:
        event_id: Unique identifier for this event instance
        timestamp: When the event occurred
        session_id: ID of the search session that emitted the event
        sequence: Sequence number of the search the event belongs to
        metadata: Additional context about the event
    """

    model_config = ConfigDict(
        frozen=True,  # Events are immutable
    )

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the event occurred",
    )
    session_id: str = Field(description="Emitting session")
    sequence: int = Field(ge=1, description="Search sequence number")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event context",
    )

    @property
    def event_type(self) -> str:
        """Return the event type name (class name)."""
        return self.__class__.__name__

    def to_log_dict(self) -> dict[str, Any]:
        """Flatten the event into structured logging fields."""
        return {
            "event_type": self.event_type,
            **self.model_dump(
                mode="json", exclude={"event_id", "timestamp", "metadata"}
            ),
        }
