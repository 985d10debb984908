"""Search API endpoints.

Provides a one-shot search endpoint and session endpoints for search
surfaces that issue queries over time (issue, submit, refresh, state,
close).
"""

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.corpus.base import MessageCorpus
from src.search.engine import run_search
from src.search.errors import CorpusUnavailable, SessionNotFoundError
from src.search.filters import SearchFilters
from src.search.registry import SessionRegistry
from src.search.schemas import SearchResult, SessionState
from src.search.session import SearchSession

search_router = APIRouter(prefix="/search", tags=["search"])


# Pydantic models for request/response
class SearchResponse(BaseModel):
    """Response for the one-shot search endpoint."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    query: str = Field(description="Original search query")
    filters: SearchFilters = Field(description="Filters applied")
    total_results: int = Field(description="Total number of results")
    results: list[SearchResult] = Field(
        default_factory=list, description="Ranked results, newest first"
    )


class IssueRequest(BaseModel):
    """Request body for issuing a search on a session."""

    query: str = Field(default="", description="Free-text query (may be empty)")
    filters: SearchFilters = Field(
        default_factory=SearchFilters, description="Structured constraints"
    )
    wait: bool = Field(
        default=True,
        description="Wait for the search to settle before responding",
    )


# Dependency functions
def get_corpus(request: Request) -> MessageCorpus:
    """Get the corpus from app state."""
    if not hasattr(request.app.state, "corpus"):
        raise HTTPException(status_code=500, detail="Corpus not initialized")
    return request.app.state.corpus


def get_registry(request: Request) -> SessionRegistry:
    """Get SessionRegistry from app state."""
    if not hasattr(request.app.state, "session_registry"):
        raise HTTPException(status_code=500, detail="SessionRegistry not initialized")
    return request.app.state.session_registry


def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> SearchSession:
    """Resolve the session named in the path."""
    try:
        return registry.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=404, detail=f"Session {session_id} not found"
        ) from None


@search_router.get("", response_model=SearchResponse)
async def search(
    q: str = Query(default="", description="Search query"),
    channel_id: str | None = Query(default=None, description="Filter by channel"),
    user_id: str | None = Query(default=None, description="Filter by author"),
    has_file: bool | None = Query(
        default=None, description="Only messages with attachments"
    ),
    corpus: MessageCorpus = Depends(get_corpus),
) -> SearchResponse:
    """Search messages once, without a session.

    An empty query with no filters returns every message, newest first.
    """
    filters = SearchFilters(channel_id=channel_id, user_id=user_id, has_file=has_file)
    try:
        results = await run_search(q, filters, corpus)
    except CorpusUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return SearchResponse(
        query=q,
        filters=filters,
        total_results=len(results),
        results=results,
    )


@search_router.post("/sessions", response_model=SessionState, status_code=201)
async def create_session(
    registry: SessionRegistry = Depends(get_registry),
) -> SessionState:
    """Open a search session for a new search surface."""
    session = await registry.create()
    return session.current_state()


@search_router.get("/sessions/{session_id}", response_model=SessionState)
async def get_session_state(
    session: SearchSession = Depends(get_session),
) -> SessionState:
    """Get the current state of a session."""
    return session.current_state()


@search_router.post("/sessions/{session_id}/issue", response_model=SessionState)
async def issue_search(
    body: IssueRequest,
    session: SearchSession = Depends(get_session),
) -> SessionState:
    """Issue a search on a session, superseding any search in flight.

    Corpus failures are reported in the returned state, not as HTTP errors.
    """
    task = session.issue(body.query, body.filters)
    if body.wait:
        await asyncio.wait({task})
    return session.current_state()


@search_router.post(
    "/sessions/{session_id}/submit", response_model=SessionState, status_code=202
)
async def submit_search(
    body: IssueRequest,
    session: SearchSession = Depends(get_session),
) -> SessionState:
    """Submit a keystroke-level query; only the last of a burst is issued."""
    session.submit(body.query, body.filters)
    if body.wait:
        return await session.wait()
    return session.current_state()


@search_router.post("/sessions/{session_id}/refresh", response_model=SessionState)
async def refresh_search(
    wait: bool = Query(default=True, description="Wait for the search to settle"),
    session: SearchSession = Depends(get_session),
) -> SessionState:
    """Re-issue the session's last query and filters."""
    task = session.refresh()
    if wait:
        await asyncio.wait({task})
    return session.current_state()


@search_router.delete("/sessions/{session_id}", status_code=204)
async def close_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> Response:
    """Close a session when its search surface goes away."""
    try:
        await registry.close(session_id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=404, detail=f"Session {session_id} not found"
        ) from None
    return Response(status_code=204)
