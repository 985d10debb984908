"""Message and attachment models."""

from datetime import datetime

from pydantic import Field, field_validator

from src.models.base import Record, ensure_utc


class Attachment(Record):
    """A file attached to a message.

    Only presence is reasoned about by search; the remaining fields
    pass through to results for display.
    """

    url: str | None = Field(default=None, description="Download URL")
    filename: str = Field(description="Original filename")
    content_type: str = Field(
        default="application/octet-stream", description="MIME type"
    )
    size: int = Field(default=0, ge=0, description="Size in bytes")


class Message(Record):
    """A chat message as produced by the corpus."""

    author_id: str = Field(description="ID of the user who wrote the message")
    channel_id: str = Field(description="ID of the channel the message was posted in")
    server_id: str | None = Field(default=None, description="Owning server, if known")
    content: str = Field(default="", description="Message text")
    attachments: list[Attachment] = Field(
        default_factory=list,
        description="Attached files (empty when none)",
    )
    created_at: datetime = Field(description="When the message was posted")
    updated_at: datetime | None = Field(default=None, description="Last edit time")

    @field_validator("attachments", mode="before")
    @classmethod
    def missing_attachments_are_empty(cls, v: object) -> object:
        """A null attachment list means no attachments."""
        return [] if v is None else v

    @field_validator("created_at", "updated_at")
    @classmethod
    def timestamps_are_utc(cls, v: datetime | None) -> datetime | None:
        """Normalize naive timestamps to UTC."""
        return ensure_utc(v) if v is not None else None

    @property
    def has_attachments(self) -> bool:
        """True if at least one file is attached."""
        return len(self.attachments) > 0
