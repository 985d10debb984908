"""Message search engine.

Provides query normalization, facet filtering, substring matching,
recency ranking, and sequenced search sessions.
"""

from src.search.engine import run_search
from src.search.errors import (
    CorpusUnavailable,
    SearchError,
    SearchTimeout,
    SessionClosedError,
    SessionNotFoundError,
)
from src.search.filters import SearchFilters, build_predicate
from src.search.matcher import matches
from src.search.normalizer import EMPTY, NormalizedQuery, normalize
from src.search.ranker import RankingStrategy, RecencyStrategy, rank
from src.search.registry import SessionRegistry
from src.search.schemas import (
    Directory,
    SearchOutcome,
    SearchResult,
    SearchStatus,
    SessionError,
    SessionState,
)
from src.search.session import SearchSession

__all__ = [
    "EMPTY",
    "CorpusUnavailable",
    "Directory",
    "NormalizedQuery",
    "RankingStrategy",
    "RecencyStrategy",
    "SearchError",
    "SearchFilters",
    "SearchOutcome",
    "SearchResult",
    "SearchSession",
    "SearchStatus",
    "SearchTimeout",
    "SessionClosedError",
    "SessionError",
    "SessionNotFoundError",
    "SessionRegistry",
    "SessionState",
    "build_predicate",
    "matches",
    "normalize",
    "rank",
    "run_search",
]
