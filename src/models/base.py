"""Base record class for all corpus models."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so corpus records stay comparable."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class Record(BaseModel):
    """Base class for records supplied by the message corpus.

    Provides:
    - String identifier assigned by the corpus
    - Immutability (the engine never mutates corpus records)
    - camelCase aliases so backend payloads load as-is
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str = Field(min_length=1, description="Identifier assigned by the corpus")
