"""Query normalization.

Canonicalizes raw text input into a comparable token: trims, collapses
internal whitespace runs to a single space and case-folds. An input that
normalizes to nothing is the EMPTY query, meaning "no text constraint".
"""

import re

from pydantic import BaseModel, ConfigDict, Field

_WHITESPACE = re.compile(r"\s+")


class NormalizedQuery(BaseModel):
    """A canonicalized free-text query."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Trimmed, collapsed, case-folded text")

    @property
    def is_empty(self) -> bool:
        """True when the query places no text constraint."""
        return not self.text


EMPTY = NormalizedQuery()


def fold(value: str | None) -> str:
    """Collapse whitespace and case-fold a string for comparison.

    Applied identically to queries and to the fields they are matched
    against, so comparisons are case-insensitive on both sides.
    """
    if not value:
        return ""
    return _WHITESPACE.sub(" ", value.strip()).casefold()


def normalize(raw: str | None) -> NormalizedQuery:
    """Normalize raw search input.

    Total over all input: never raises. Whitespace-only and empty input
    return the EMPTY sentinel.

    Example:
        >>> normalize("  Project   FILES ").text
        'project files'
    """
    text = fold(raw)
    if not text:
        return EMPTY
    return NormalizedQuery(text=text)
