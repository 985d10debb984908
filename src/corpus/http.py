"""REST-backed corpus.

Reads messages and lookup entities from the chat backend's JSON API.
Transient failures (transport errors, 5xx responses) are retried with
exponential backoff; once retries are exhausted the failure surfaces as
CorpusUnavailable.
"""

import logging
from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.models.directory import Channel, Server, User
from src.models.message import Message
from src.search.errors import CorpusUnavailable

logger = structlog.get_logger()

T = TypeVar("T", bound=BaseModel)

_MESSAGES = TypeAdapter(list[Message])


class BackendServerError(Exception):
    """The backend answered with a 5xx status."""

    def __init__(self, status_code: int, path: str):
        super().__init__(f"Backend returned {status_code} for {path}")
        self.status_code = status_code


# Exceptions that are retriable (transient failures)
RETRIABLE_EXCEPTIONS = (
    httpx.TransportError,
    BackendServerError,
)


class HttpCorpus:
    """Corpus reading from a REST backend.

    Endpoints (relative to base_url):
    - GET /messages -> list of messages
    - GET /users/{id}, /channels/{id}, /servers/{id} -> single entity
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout_seconds: float = 10.0,
        max_attempts: int = 3,
        backoff_multiplier: float = 0.5,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize with backend location.

        Args:
            base_url: API root (e.g., https://hearth.local/api/v1)
            token: Optional bearer token
            timeout_seconds: Per-request timeout
            max_attempts: Attempts per request before giving up
            backoff_multiplier: Base of the exponential backoff in seconds
            client: Pre-built client (tests inject a mock transport here)
        """
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._base_url = base_url.rstrip("/")
        self._max_attempts = max_attempts
        self._backoff = backoff_multiplier
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=timeout_seconds,
        )

    async def _get(self, path: str) -> Any | None:
        """GET a JSON document with retry.

        Returns:
            Decoded JSON, or None on 404

        Raises:
            CorpusUnavailable: On non-retriable errors or exhausted retries
        """

        @retry(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._backoff, max=8),
            retry=retry_if_exception_type(RETRIABLE_EXCEPTIONS),
            before_sleep=before_sleep_log(logger, log_level=logging.INFO),
            reraise=True,
        )
        async def inner() -> httpx.Response:
            response = await self._client.get(path)
            if response.status_code >= 500:
                raise BackendServerError(response.status_code, path)
            return response

        try:
            response = await inner()
        except RETRIABLE_EXCEPTIONS as e:
            logger.error(
                "corpus request failed",
                path=path,
                attempts=self._max_attempts,
                error=str(e),
            )
            raise CorpusUnavailable(f"Corpus request {path} failed: {e}") from e

        if response.status_code == 404:
            return None
        if response.is_error:
            raise CorpusUnavailable(
                f"Corpus request {path} returned {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise CorpusUnavailable(f"Corpus returned invalid JSON for {path}") from e

    async def fetch_messages(self) -> list[Message]:
        data = await self._get("/messages")
        if data is None:
            raise CorpusUnavailable("Corpus has no /messages endpoint")
        try:
            return _MESSAGES.validate_python(data)
        except ValidationError as e:
            raise CorpusUnavailable(f"Malformed message payload: {e}") from e

    async def _lookup(self, model: type[T], path: str) -> T | None:
        data = await self._get(path)
        if data is None:
            return None
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise CorpusUnavailable(f"Malformed payload for {path}: {e}") from e

    async def lookup_user(self, user_id: str) -> User | None:
        return await self._lookup(User, f"/users/{user_id}")

    async def lookup_channel(self, channel_id: str) -> Channel | None:
        return await self._lookup(Channel, f"/channels/{channel_id}")

    async def lookup_server(self, server_id: str) -> Server | None:
        return await self._lookup(Server, f"/servers/{server_id}")

    async def health_check(self) -> bool:
        try:
            response = await self._client.get("/messages")
            return response.status_code < 500
        except httpx.HTTPError as e:
            logger.warning("corpus health check failed", error=str(e))
            return False

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
