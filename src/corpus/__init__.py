"""Corpus collaborators that supply messages to the search engine.

Provides:
- MessageCorpus: Protocol every corpus implements
- InMemoryCorpus: Fixed snapshot, optionally loaded from JSON
- HttpCorpus: REST backend with retry
- build_corpus: Corpus selected by configuration
"""

from pathlib import Path

from src.config import Settings
from src.corpus.base import MessageCorpus
from src.corpus.http import HttpCorpus
from src.corpus.memory import CorpusSnapshot, InMemoryCorpus
from src.corpus.sample import sample_corpus


def build_corpus(settings: Settings) -> MessageCorpus:
    """Create the corpus configured by settings.

    Raises:
        ValueError: If the file backend is selected without a corpus_file
        CorpusUnavailable: If the corpus file cannot be loaded
    """
    latency = settings.corpus_latency_ms / 1000

    if settings.corpus_backend == "http":
        return HttpCorpus(settings.corpus_api_url, token=settings.corpus_api_token)

    if settings.corpus_backend == "file":
        if not settings.corpus_file:
            raise ValueError("corpus_backend 'file' requires CORPUS_FILE to be set")
        return InMemoryCorpus.from_file(
            Path(settings.corpus_file).expanduser(), latency_seconds=latency
        )

    return sample_corpus(latency_seconds=latency)


__all__ = [
    "CorpusSnapshot",
    "HttpCorpus",
    "InMemoryCorpus",
    "MessageCorpus",
    "build_corpus",
    "sample_corpus",
]
