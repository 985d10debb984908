"""Search pipeline over a corpus snapshot.

Runs one search end to end: fetch, deduplicate, facet filter, text
match, rank. Holds no session state; sequencing lives in the session.
"""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

import structlog

from src.corpus.base import MessageCorpus
from src.models.message import Message
from src.search.errors import CorpusUnavailable
from src.search.filters import SearchFilters, active_facets, build_predicate
from src.search.matcher import matches
from src.search.normalizer import normalize
from src.search.ranker import RankingStrategy, rank
from src.search.schemas import Directory, SearchResult

logger = structlog.get_logger()

T = TypeVar("T")


async def read_corpus(call: Awaitable[T]) -> T:
    """Await a corpus call, reporting any failure as CorpusUnavailable.

    Failures outside corpus calls (ranking, enrichment) are not wrapped
    and surface as themselves.
    """
    try:
        return await call
    except CorpusUnavailable:
        raise
    except Exception as e:
        raise CorpusUnavailable(str(e) or type(e).__name__) from e


def unique_by_id(messages: list[Message]) -> list[Message]:
    """Drop repeated message ids, keeping the first occurrence."""
    seen: set[str] = set()
    unique = []
    for message in messages:
        if message.id in seen:
            continue
        seen.add(message.id)
        unique.append(message)
    return unique


async def resolve_directory(
    corpus: MessageCorpus,
    *,
    user_ids: set[str] | None = None,
    channel_ids: set[str] | None = None,
    server_ids: set[str] | None = None,
    base: Directory | None = None,
) -> Directory:
    """Look up the entities a set of messages refers to.

    Lookups run concurrently. Entities already present in base are not
    looked up again. Servers owning the resolved channels are included.
    Unknown ids are simply absent from the result.
    """
    base = base or Directory()
    wanted_users = sorted((user_ids or set()) - base.users.keys())
    wanted_channels = sorted((channel_ids or set()) - base.channels.keys())

    users, channels = await asyncio.gather(
        asyncio.gather(*(corpus.lookup_user(uid) for uid in wanted_users)),
        asyncio.gather(*(corpus.lookup_channel(cid) for cid in wanted_channels)),
    )
    resolved_channels = {c.id: c for c in channels if c is not None}

    wanted_servers = set(server_ids or set())
    wanted_servers.update(c.server_id for c in resolved_channels.values() if c.server_id)
    servers = await asyncio.gather(
        *(
            corpus.lookup_server(sid)
            for sid in sorted(wanted_servers - base.servers.keys())
        )
    )

    return Directory(
        users={**base.users, **{u.id: u for u in users if u is not None}},
        channels={**base.channels, **resolved_channels},
        servers={**base.servers, **{s.id: s for s in servers if s is not None}},
    )


async def run_search(
    query: str,
    filters: SearchFilters | None,
    corpus: MessageCorpus,
    strategy: RankingStrategy | None = None,
) -> list[SearchResult]:
    """Run one search against the corpus.

    Args:
        query: Raw free-text input
        filters: Structured constraints (None means unconstrained)
        corpus: Source of messages and lookup entities
        strategy: Ordering strategy (defaults to recency)

    Returns:
        Ranked, enriched results; each corpus message appears at most once

    Raises:
        CorpusUnavailable: If the corpus cannot be read
    """
    filters = filters or SearchFilters()
    normalized = normalize(query)
    predicate = build_predicate(filters)

    messages = unique_by_id(await read_corpus(corpus.fetch_messages()))

    # Facets need no lookups, so narrow before resolving authors
    candidates = [m for m in messages if predicate(m)]
    authors = await read_corpus(
        resolve_directory(corpus, user_ids={m.author_id for m in candidates})
    )
    matched = [
        m for m in candidates if matches(normalized, m, authors.user(m.author_id))
    ]

    directory = await read_corpus(
        resolve_directory(
            corpus,
            channel_ids={m.channel_id for m in matched},
            server_ids={m.server_id for m in matched if m.server_id},
            base=authors,
        )
    )
    results = rank(matched, directory, strategy)

    logger.debug(
        "search executed",
        query=normalized.text,
        facets=active_facets(filters),
        scanned=len(messages),
        matched=len(results),
    )
    return results
