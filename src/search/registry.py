"""Registry of live search sessions.

Each search surface owns exactly one session, created when the surface
opens and closed when it goes away. The registry hands out sessions by
id to the HTTP layer; it is not a global singleton and is owned by the
application state.
"""

from collections import OrderedDict

import structlog

from src.config import Settings
from src.corpus.base import MessageCorpus
from src.events.bus import EventBus
from src.search.errors import SessionNotFoundError
from src.search.session import SearchSession

logger = structlog.get_logger()


class SessionRegistry:
    """Creates, looks up, and closes search sessions.

    When max_sessions is reached the least recently used session is
    closed to make room for the new one; its surface gets a not-found
    error on its next request and must open a new session.
    """

    def __init__(
        self,
        corpus: MessageCorpus,
        settings: Settings,
        bus: EventBus | None = None,
    ):
        """Initialize an empty registry.

        Args:
            corpus: Corpus shared by all sessions
            settings: Source of debounce, timeout and capacity settings
            bus: Optional event bus passed to every session
        """
        self._corpus = corpus
        self._settings = settings
        self._bus = bus
        self._sessions: OrderedDict[str, SearchSession] = OrderedDict()

    async def create(self) -> SearchSession:
        """Open a new session for a search surface."""
        while len(self._sessions) >= self._settings.max_sessions:
            oldest_id, oldest = self._sessions.popitem(last=False)
            logger.warning("evicting search session", session_id=oldest_id)
            await oldest.close()

        session = SearchSession(
            self._corpus,
            bus=self._bus,
            debounce_seconds=self._settings.search_debounce_ms / 1000,
            timeout_seconds=self._settings.search_timeout_seconds,
            cancel_superseded=self._settings.cancel_superseded,
        )
        self._sessions[session.session_id] = session
        logger.info("search session created", session_id=session.session_id)
        return session

    def get(self, session_id: str) -> SearchSession:
        """Return a live session.

        Raises:
            SessionNotFoundError: If no session has this id
        """
        try:
            session = self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None
        self._sessions.move_to_end(session_id)
        return session

    async def close(self, session_id: str) -> None:
        """Close and forget a session.

        Raises:
            SessionNotFoundError: If no session has this id
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        await session.close()
        logger.info("search session closed", session_id=session_id)

    async def close_all(self) -> None:
        """Close every session (application shutdown)."""
        sessions = list(self._sessions.values())
        self._sessions.clear()
        for session in sessions:
            await session.close()

    def __len__(self) -> int:
        """Return number of live sessions."""
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
