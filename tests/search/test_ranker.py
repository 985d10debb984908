"""Tests for result ranking and enrichment."""

from datetime import UTC, datetime, timedelta

from src.models.directory import Channel, Server, User
from src.models.message import Message
from src.search.ranker import RankingStrategy, RecencyStrategy, enrich, rank
from src.search.schemas import Directory

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def message(msg_id: str, minutes: int, **overrides) -> Message:
    data = {
        "id": msg_id,
        "author_id": "u1",
        "channel_id": "c1",
        "content": msg_id,
        "created_at": T0 + timedelta(minutes=minutes),
    }
    data.update(overrides)
    return Message(**data)


DIRECTORY = Directory(
    users={"u1": User(id="u1", username="johndoe", display_name="John Doe")},
    channels={"c1": Channel(id="c1", name="general", server_id="s1")},
    servers={"s1": Server(id="s1", name="My Server")},
)


class TestRecencyStrategy:
    """Tests for the default ordering."""

    def test_newest_first(self) -> None:
        """Messages are ordered by created_at descending."""
        ordered = RecencyStrategy().order([message("a", 1), message("b", 3), message("c", 2)])
        assert [m.id for m in ordered] == ["b", "c", "a"]

    def test_ties_broken_by_ascending_id(self) -> None:
        """Equal timestamps fall back to id order."""
        ordered = RecencyStrategy().order(
            [message("m3", 5), message("m1", 5), message("m9", 9), message("m2", 5)]
        )
        assert [m.id for m in ordered] == ["m9", "m1", "m2", "m3"]

    def test_order_independent_of_input_order(self) -> None:
        """Shuffled input yields the same order."""
        msgs = [message("x", 1), message("y", 1), message("z", 2)]
        strategy = RecencyStrategy()
        assert strategy.order(msgs) == strategy.order(list(reversed(msgs)))

    def test_implements_protocol(self) -> None:
        """RecencyStrategy satisfies RankingStrategy."""
        assert isinstance(RecencyStrategy(), RankingStrategy)


class TestEnrich:
    """Tests for result enrichment."""

    def test_joins_display_names(self) -> None:
        """Author, channel and server names are denormalized."""
        result = enrich(message("a", 0), DIRECTORY)
        assert result.author is not None
        assert result.author.display_name == "John Doe"
        assert result.channel_name == "general"
        assert result.server_name == "My Server"
        assert result.id == "a"

    def test_unknown_ids_give_none(self) -> None:
        """Missing lookups leave display fields empty."""
        result = enrich(message("a", 0, author_id="ghost", channel_id="gone"), DIRECTORY)
        assert result.author is None
        assert result.channel_name is None
        assert result.server_name is None

    def test_message_server_id_used_without_channel(self) -> None:
        """A message's own server_id resolves the server name."""
        result = enrich(message("a", 0, channel_id="gone", server_id="s1"), DIRECTORY)
        assert result.server_name == "My Server"


class TestRank:
    """Tests for rank()."""

    def test_default_strategy(self) -> None:
        """rank() applies recency ordering by default."""
        results = rank([message("a", 1), message("b", 2)], DIRECTORY)
        assert [r.id for r in results] == ["b", "a"]

    def test_custom_strategy(self) -> None:
        """A pluggable strategy replaces the ordering."""

        class OldestFirst:
            def order(self, messages: list[Message]) -> list[Message]:
                return sorted(messages, key=lambda m: m.created_at)

        results = rank([message("a", 1), message("b", 2)], DIRECTORY, OldestFirst())
        assert [r.id for r in results] == ["a", "b"]

    def test_empty(self) -> None:
        """No matches rank to no results."""
        assert rank([], DIRECTORY) == []
