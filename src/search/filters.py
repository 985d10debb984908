"""Facet filter stack.

Turns the structured constraint set (channel, author, attachment
presence) into one predicate over messages. Each present facet adds an
independent predicate and the predicates are ANDed; absent facets add
nothing, so no filter configuration can broaden a query beyond "all
messages".
"""

from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from src.models.message import Message

Predicate = Callable[[Message], bool]


class SearchFilters(BaseModel):
    """Structured search constraints.

    Every field is optional; absence means "unconstrained", not
    "match none". The name fields are display labels carried alongside
    the ids and never constrain matching.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    channel_id: str | None = Field(default=None, description="Only this channel")
    channel_name: str | None = Field(default=None, description="Label for channel_id")
    user_id: str | None = Field(default=None, description="Only this author")
    user_name: str | None = Field(default=None, description="Label for user_id")
    has_file: bool | None = Field(
        default=None,
        description="True requires attachments; False/None do not constrain",
    )

    @field_validator("channel_id", "user_id")
    @classmethod
    def blank_id_is_absent(cls, v: str | None) -> str | None:
        """An empty id is the same as no id."""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("channel_name", "user_name")
    @classmethod
    def label_needs_id(cls, v: str | None, info: ValidationInfo) -> str | None:
        """A label is dropped together with the id it describes."""
        id_field = "channel_id" if info.field_name == "channel_name" else "user_id"
        if info.data.get(id_field) is None:
            return None
        return v

    @property
    def is_unconstrained(self) -> bool:
        """True if no facet is set."""
        return not active_facets(self)


def active_facets(filters: SearchFilters) -> list[str]:
    """Names of the facets that contribute a predicate."""
    facets = []
    if filters.channel_id is not None:
        facets.append("channel")
    if filters.user_id is not None:
        facets.append("user")
    if filters.has_file is True:
        facets.append("has_file")
    return facets


def build_predicate(filters: SearchFilters | None) -> Predicate:
    """Build the conjunctive predicate for a filter set.

    Args:
        filters: Structured constraints, or None for no constraints

    Returns:
        Callable returning True for messages that satisfy every present facet
    """
    if filters is None:
        filters = SearchFilters()

    predicates: list[Predicate] = []

    if filters.channel_id is not None:
        channel_id = filters.channel_id
        predicates.append(lambda message: message.channel_id == channel_id)

    if filters.user_id is not None:
        user_id = filters.user_id
        predicates.append(lambda message: message.author_id == user_id)

    # has_file=False is "not required", never "must have none"
    if filters.has_file is True:
        predicates.append(lambda message: message.has_attachments)

    def predicate(message: Message) -> bool:
        return all(check(message) for check in predicates)

    return predicate
