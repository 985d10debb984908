"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.router import api_router
from src.config import settings
from src.corpus import build_corpus
from src.events.bus import EventBus
from src.events.types import SearchFailed, SearchSucceeded
from src.search.registry import SessionRegistry

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _log_outcome(event: SearchSucceeded | SearchFailed) -> None:
    """Record settled searches in the application log."""
    logger.info(f"{event.event_type}: session={event.session_id} seq={event.sequence}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management.

    Startup:
    - Build the configured corpus
    - Initialize event bus
    - Initialize session registry

    Shutdown:
    - Close all search sessions
    - Close the corpus client if it holds one
    """
    # Startup
    logger.info(f"Starting {settings.app_name}...")

    corpus = build_corpus(settings)
    app.state.corpus = corpus
    logger.info(f"Corpus initialized: backend={settings.corpus_backend}")

    event_bus = EventBus()
    event_bus.subscribe(SearchSucceeded, _log_outcome)
    event_bus.subscribe(SearchFailed, _log_outcome)
    app.state.event_bus = event_bus
    logger.info("Event bus initialized")

    registry = SessionRegistry(corpus, settings, bus=event_bus)
    app.state.session_registry = registry
    logger.info("Session registry initialized")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await registry.close_all()
    close = getattr(corpus, "close", None)
    if close is not None:
        await close()
    logger.info("Corpus closed")


app = FastAPI(
    title=settings.app_name,
    description="Message search over a chat corpus",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
