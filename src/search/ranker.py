"""Result ranking.

The default strategy orders purely by time: most recent first, ties
broken by ascending message id so repeated searches over an unchanged
corpus produce identical lists. Other strategies can be plugged in
behind the same contract.
"""

from typing import Protocol, runtime_checkable

from src.models.message import Message
from src.search.schemas import Directory, SearchResult


@runtime_checkable
class RankingStrategy(Protocol):
    """Protocol for orderings of matched messages."""

    def order(self, messages: list[Message]) -> list[Message]:
        """Return the messages in presentation order."""
        ...


class RecencyStrategy:
    """Newest first; ascending id among messages posted at the same time."""

    def order(self, messages: list[Message]) -> list[Message]:
        # Stable sorts: apply the tie-breaker first, then the primary key
        by_id = sorted(messages, key=lambda m: m.id)
        return sorted(by_id, key=lambda m: m.created_at, reverse=True)


DEFAULT_STRATEGY = RecencyStrategy()


def enrich(message: Message, directory: Directory) -> SearchResult:
    """Join author, channel and server display names into a message."""
    channel = directory.channel(message.channel_id)
    server_id = message.server_id or (channel.server_id if channel else None)
    server = directory.server(server_id)

    return SearchResult(
        **message.model_dump(),
        author=directory.user(message.author_id),
        channel_name=channel.name if channel else None,
        server_name=server.name if server else None,
    )


def rank(
    matches: list[Message],
    directory: Directory,
    strategy: RankingStrategy | None = None,
) -> list[SearchResult]:
    """Order matched messages and enrich them for display.

    Args:
        matches: Messages that passed the filters and the text matcher
        directory: Lookup entities for enrichment
        strategy: Ordering to apply (defaults to recency)

    Returns:
        Ordered list of SearchResult
    """
    strategy = strategy or DEFAULT_STRATEGY
    return [enrich(message, directory) for message in strategy.order(matches)]
