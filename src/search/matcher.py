"""Free-text matching of a normalized query against a message.

Substring semantics, not word-boundary semantics: "file" matches
content containing "files". The query is tested against the message
content, the author's display name and the author's username.
"""

from src.models.directory import User
from src.models.message import Message
from src.search.normalizer import NormalizedQuery, fold


def searchable_fields(message: Message, author: User | None) -> list[str]:
    """Folded text fields a query is matched against.

    A message whose author could not be resolved is searchable by
    content only.
    """
    fields = [fold(message.content)]
    if author is not None:
        fields.append(fold(author.display_name))
        fields.append(fold(author.username))
    return fields


def matches(query: NormalizedQuery, message: Message, author: User | None) -> bool:
    """Test whether a message satisfies the text constraint.

    Args:
        query: Normalized query (EMPTY matches everything)
        message: Candidate message
        author: Resolved author of the message, if known

    Returns:
        True if the query is a substring of any searchable field
    """
    if query.is_empty:
        return True
    return any(query.text in field for field in searchable_fields(message, author))
