"""Exceptions raised by the search engine and its corpus collaborators."""


class SearchError(Exception):
    """Base class for search engine errors."""

    kind = "search_error"


class CorpusUnavailable(SearchError):
    """The corpus could not be read for the current search.

    Not retried by the session; retry policy belongs to the corpus
    collaborator or the caller.
    """

    kind = "corpus_unavailable"


class SearchTimeout(CorpusUnavailable):
    """The corpus did not resolve within the configured timeout."""

    kind = "timeout"


class SessionClosedError(SearchError):
    """A closed session was asked to issue another search."""

    kind = "session_closed"


class SessionNotFoundError(SearchError, KeyError):
    """No session is registered under the requested id."""

    kind = "session_not_found"
