"""Tests for the REST-backed corpus."""

import httpx
import pytest

from src.corpus.base import MessageCorpus
from src.corpus.http import HttpCorpus
from src.search.errors import CorpusUnavailable

MESSAGES = [
    {
        "id": "msg1",
        "content": "Welcome",
        "authorId": "1",
        "channelId": "1",
        "createdAt": "2026-01-15T10:00:00Z",
        "attachments": None,
    }
]


def make_corpus(handler, max_attempts: int = 3) -> HttpCorpus:
    client = httpx.AsyncClient(
        base_url="http://backend", transport=httpx.MockTransport(handler)
    )
    return HttpCorpus(
        "http://backend",
        max_attempts=max_attempts,
        backoff_multiplier=0,
        client=client,
    )


class TestHttpCorpus:
    """Tests for HttpCorpus."""

    @pytest.mark.asyncio
    async def test_fetch_messages(self) -> None:
        """Messages are decoded from the backend payload."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/messages"
            return httpx.Response(200, json=MESSAGES)

        corpus = make_corpus(handler)
        [message] = await corpus.fetch_messages()
        assert message.id == "msg1"
        assert message.attachments == []
        assert isinstance(corpus, MessageCorpus)
        await corpus.close()

    @pytest.mark.asyncio
    async def test_lookup_user(self) -> None:
        """Entity lookups decode camelCase payloads."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, json={"id": "1", "username": "johndoe", "displayName": "John Doe"}
            )

        user = await make_corpus(handler).lookup_user("1")
        assert user is not None
        assert user.display_name == "John Doe"

    @pytest.mark.asyncio
    async def test_lookup_not_found(self) -> None:
        """A 404 lookup resolves to None."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        assert await make_corpus(handler).lookup_channel("missing") is None

    @pytest.mark.asyncio
    async def test_retries_server_errors_then_fails(self) -> None:
        """5xx responses are retried max_attempts times, then reported."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(503)

        with pytest.raises(CorpusUnavailable):
            await make_corpus(handler, max_attempts=3).fetch_messages()
        assert calls == 3

    @pytest.mark.asyncio
    async def test_recovers_after_transient_error(self) -> None:
        """A transient failure followed by success returns the data."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json=MESSAGES)

        messages = await make_corpus(handler).fetch_messages()
        assert len(messages) == 1
        assert calls == 2

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self) -> None:
        """4xx responses other than 404 fail immediately."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(401)

        with pytest.raises(CorpusUnavailable):
            await make_corpus(handler).fetch_messages()
        assert calls == 1

    @pytest.mark.asyncio
    async def test_malformed_payload(self) -> None:
        """Payloads failing validation raise CorpusUnavailable."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"id": "m"}])

        with pytest.raises(CorpusUnavailable):
            await make_corpus(handler).fetch_messages()

    @pytest.mark.asyncio
    async def test_health_check(self) -> None:
        """Health check reports backend reachability."""

        def healthy(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[])

        def down(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        assert await make_corpus(healthy).health_check() is True
        assert await make_corpus(down).health_check() is False

    def test_bearer_token_header(self) -> None:
        """A configured token is sent as a bearer header."""
        corpus = HttpCorpus("http://backend/", token="secret")
        assert corpus._client.headers["Authorization"] == "Bearer secret"
        assert str(corpus._client.base_url) == "http://backend"
