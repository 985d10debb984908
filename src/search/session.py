"""Search session controller.

Owns the lifecycle of one search surface's queries over time. Every
issued search captures a sequence number; when its corpus fetch
completes the result is applied only if that number is still the
session's current sequence. Older searches that complete late are
discarded, so results surface in issue order regardless of completion
order. The session runs on a single event loop, which serializes the
compare-and-apply step without locks.

States: idle -> searching -> success | error; issue() is accepted from
any state and always preempts the search in flight.
"""

import asyncio
from collections.abc import Callable
from uuid import uuid4

import structlog

from src.corpus.base import MessageCorpus
from src.events.base import Event
from src.events.bus import EventBus
from src.events.types import SearchFailed, SearchIssued, SearchSucceeded
from src.search.engine import run_search
from src.search.errors import (
    SearchError,
    SearchTimeout,
    SessionClosedError,
)
from src.search.filters import SearchFilters
from src.search.ranker import RankingStrategy
from src.search.schemas import (
    SearchOutcome,
    SearchResult,
    SearchStatus,
    SessionError,
    SessionState,
)

logger = structlog.get_logger()

StateListener = Callable[[SessionState], None]


class SearchSession:
    """Sequenced search lifecycle for one search surface.

    Example:
        session = SearchSession(corpus)
        await session.issue("file")
        state = session.current_state()
    """

    def __init__(
        self,
        corpus: MessageCorpus,
        *,
        session_id: str | None = None,
        bus: EventBus | None = None,
        strategy: RankingStrategy | None = None,
        debounce_seconds: float = 0.0,
        timeout_seconds: float | None = None,
        cancel_superseded: bool = True,
    ):
        """Initialize an idle session.

        Args:
            corpus: Source of messages and lookup entities
            session_id: Identifier (generated if omitted)
            bus: Optional event bus receiving transition events
            strategy: Ranking strategy (defaults to recency)
            debounce_seconds: Coalescing window used by submit()
            timeout_seconds: Fail searches that take longer than this
            cancel_superseded: Cancel the previous fetch when a new search
                is issued. Stale results are discarded either way.
        """
        self.session_id = session_id or uuid4().hex
        self._corpus = corpus
        self._bus = bus
        self._strategy = strategy
        self._debounce_seconds = debounce_seconds
        self._timeout_seconds = timeout_seconds
        self._cancel_superseded = cancel_superseded

        self._sequence = 0
        self._status = SearchStatus.IDLE
        self._query = ""
        self._filters = SearchFilters()
        self._results: list[SearchResult] = []
        self._error: SessionError | None = None

        self._fetch: asyncio.Task[list[SearchResult]] | None = None
        self._task: asyncio.Task[SearchOutcome] | None = None
        self._debounce: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task] = set()
        self._listeners: list[StateListener] = []
        self._closed = False

    @property
    def sequence(self) -> int:
        """Most recently issued sequence number (0 before the first issue)."""
        return self._sequence

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def timeout_seconds(self) -> float | None:
        return self._timeout_seconds

    @property
    def cancel_superseded(self) -> bool:
        return self._cancel_superseded

    def current_state(self) -> SessionState:
        """Return a read-only snapshot of the session."""
        return SessionState(
            session_id=self.session_id,
            sequence=self._sequence,
            status=self._status,
            query=self._query,
            filters=self._filters,
            results=list(self._results),
            error=self._error,
        )

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with every visible state change.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def issue(
        self, query: str = "", filters: SearchFilters | None = None
    ) -> "asyncio.Task[SearchOutcome]":
        """Issue a search, preempting any search in flight.

        Must be called from within a running event loop. The returned task
        resolves to APPLIED if this search determined the session state, or
        STALE if a later issue superseded it.

        Raises:
            SessionClosedError: If the session has been closed
        """
        if self._closed:
            raise SessionClosedError(f"Session {self.session_id} is closed")

        # An explicit issue overrides a submission still waiting out its window
        if self._debounce is not None and not self._debounce.done():
            self._debounce.cancel()
        return self._issue(query, filters)

    def _issue(
        self, query: str, filters: SearchFilters | None
    ) -> "asyncio.Task[SearchOutcome]":
        filters = filters or SearchFilters()
        loop = asyncio.get_running_loop()

        self._sequence += 1
        sequence = self._sequence
        self._query = query
        self._filters = filters
        self._status = SearchStatus.SEARCHING
        self._error = None

        previous = self._fetch
        if self._cancel_superseded and previous is not None and not previous.done():
            previous.cancel()

        fetch = loop.create_task(
            run_search(query, filters, self._corpus, self._strategy)
        )
        self._fetch = fetch
        self._task = loop.create_task(self._settle(sequence, query, filters, fetch))
        for task in (fetch, self._task):
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)

        logger.debug(
            "search issued",
            session_id=self.session_id,
            sequence=sequence,
            query=query,
        )
        self._notify()
        return self._task

    def refresh(self) -> "asyncio.Task[SearchOutcome]":
        """Re-issue the last query and filters with a new sequence number."""
        return self.issue(self._query, self._filters)

    def submit(self, query: str = "", filters: SearchFilters | None = None) -> None:
        """Issue a search after the debounce window.

        Submissions arriving within the window replace each other; only the
        last one of a burst is issued. With no window this is issue().
        """
        if self._closed:
            raise SessionClosedError(f"Session {self.session_id} is closed")

        if self._debounce_seconds <= 0:
            self.issue(query, filters)
            return

        if self._debounce is not None and not self._debounce.done():
            self._debounce.cancel()
        self._debounce = asyncio.get_running_loop().create_task(
            self._issue_later(query, filters)
        )

    async def wait(self) -> SessionState:
        """Wait until pending submissions and the current search settle.

        Waiting never cancels the underlying work. A search whose corpus
        call never resolves keeps this waiting, unless a timeout is set.
        """
        while True:
            pending = [
                task
                for task in (self._debounce, self._task)
                if task is not None and not task.done()
            ]
            if not pending:
                return self.current_state()
            await asyncio.wait(pending)

    async def close(self) -> None:
        """Cancel outstanding work. The session cannot issue afterwards."""
        if self._closed:
            return
        self._closed = True

        # Superseded searches that were not cancelled are still in flight
        tasks = set(self._in_flight)
        if self._debounce is not None:
            tasks.add(self._debounce)
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._listeners.clear()
        logger.debug("search session closed", session_id=self.session_id)

    async def _issue_later(self, query: str, filters: SearchFilters | None) -> None:
        await asyncio.sleep(self._debounce_seconds)
        self._issue(query, filters)

    async def _settle(
        self,
        sequence: int,
        query: str,
        filters: SearchFilters,
        fetch: "asyncio.Task[list[SearchResult]]",
    ) -> SearchOutcome:
        """Await one search's fetch and apply it if it is still current."""
        log = logger.bind(session_id=self.session_id, sequence=sequence)

        await self._publish(
            SearchIssued(
                session_id=self.session_id,
                sequence=sequence,
                query=query,
                filters=filters.model_dump(exclude_none=True),
            )
        )

        results: list[SearchResult] = []
        error: SearchError | None = None
        # Waiting never cancels the fetch; close() cancels it explicitly
        done, _ = await asyncio.wait({fetch}, timeout=self._timeout_seconds)
        if fetch not in done:
            fetch.cancel()
            error = SearchTimeout(
                f"Search did not complete within {self._timeout_seconds}s"
            )
        else:
            try:
                results = fetch.result()
            except asyncio.CancelledError:
                # Only a superseding issue cancels a fetch on its own
                if not self._closed and sequence != self._sequence:
                    log.debug("superseded search cancelled")
                    return SearchOutcome.STALE
                raise
            except SearchError as e:
                error = e
            except Exception as e:
                log.error("search pipeline failed", error=repr(e))
                error = SearchError(f"Search failed: {e!r}")

        if sequence != self._sequence:
            log.debug("stale search discarded", failed=error is not None)
            return SearchOutcome.STALE

        if error is not None:
            self._status = SearchStatus.ERROR
            self._results = []
            self._error = SessionError(kind=error.kind, message=str(error))
            log.info("search failed", error_kind=error.kind, error=str(error))
            self._notify()
            await self._publish(
                SearchFailed(
                    session_id=self.session_id,
                    sequence=sequence,
                    error_kind=error.kind,
                    error_message=str(error),
                )
            )
            return SearchOutcome.APPLIED

        self._status = SearchStatus.SUCCESS
        self._results = results
        log.info("search succeeded", result_count=len(results))
        self._notify()
        await self._publish(
            SearchSucceeded(
                session_id=self.session_id,
                sequence=sequence,
                result_count=len(results),
                result_ids=[r.id for r in results],
            )
        )
        return SearchOutcome.APPLIED

    def _notify(self) -> None:
        """Deliver the current snapshot to listeners, isolating failures."""
        if not self._listeners:
            return
        state = self.current_state()
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(
                    "session listener failed",
                    session_id=self.session_id,
                    error=str(e),
                )

    async def _publish(self, event: Event) -> None:
        if self._bus is None:
            return
        logger.debug("publishing session event", **event.to_log_dict())
        await self._bus.publish(event)
