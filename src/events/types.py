"""Typed event definitions for search session transitions.

These events mirror the visible state changes of a session:
- SearchIssued: A search was issued and the session is searching
- SearchSucceeded: The current search resolved with results
- SearchFailed: The current search failed

Superseded (stale) searches emit nothing.
"""

from pydantic import Field

from src.events.base import Event


class SearchIssued(Event):
    """Emitted when a session issues a search."""

    query: str = Field(description="Raw query as issued")
    filters: dict[str, str | bool] = Field(
        default_factory=dict, description="Present filter fields"
    )


class SearchSucceeded(Event):
    """Emitted when the current search resolves."""

    result_count: int = Field(ge=0, description="Number of results published")
    result_ids: list[str] = Field(
        default_factory=list, description="Result message ids in ranked order"
    )


class SearchFailed(Event):
    """Emitted when the current search fails."""

    error_kind: str = Field(description="Machine-readable error kind")
    error_message: str = Field(description="Human-readable description")
