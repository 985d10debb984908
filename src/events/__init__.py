"""Event infrastructure for search sessions.

Provides:
- Event: Base class for all session events
- EventBus: In-process pub/sub for event routing
"""

from src.events.base import Event
from src.events.bus import EventBus
from src.events.types import SearchFailed, SearchIssued, SearchSucceeded

__all__ = [
    # Base
    "Event",
    # Infrastructure
    "EventBus",
    # Event types
    "SearchIssued",
    "SearchSucceeded",
    "SearchFailed",
]
