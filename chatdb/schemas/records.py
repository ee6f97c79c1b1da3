"""
Caller-facing record types.

Attributes are snake_case; the aliases are the exact column names of the
hosted tables, so rows coming back from a record store validate directly
and ``to_row()`` produces an insertable payload.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from chatdb.models.base import to_iso


def _assume_utc(value: datetime) -> datetime:
    # timestamp-without-time-zone columns come back naive
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


Timestamp = Annotated[
    datetime,
    AfterValidator(_assume_utc),
    PlainSerializer(to_iso, return_type=str),
]

Visibility = Literal["private", "public"]

VoteType = Literal["up", "down"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class BlockKind(str, Enum):
    """Closed set of document block kinds."""

    TEXT = "text"
    CODE = "code"
    IMAGE = "image"
    SHEET = "sheet"


class Record(BaseModel):
    """
    Base for all stored records.

    Accepts either the wire column names or the Python attribute names.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_row(self, exclude_none: bool = False) -> Dict[str, Any]:
        """
        Serialize to a store payload keyed by column name.

        Args:
            exclude_none: Drop unset optional columns so the store applies
                its own defaults

        Returns:
            JSON-compatible dict with canonical ISO timestamps
        """
        return self.model_dump(by_alias=True, mode="json", exclude_none=exclude_none)


class User(Record):
    id: Optional[str] = None
    email: str
    password: Optional[str] = None


class Chat(Record):
    id: str
    created_at: Timestamp
    title: str
    user_id: str
    visibility: Visibility = "private"


class Message(Record):
    """
    One chat turn.

    Attributes:
        id: Message identifier
        chat_id: Parent chat
        role: Author role ("user", "assistant", "tool", ...)
        content: JSON payload of the turn (string or structured parts)
        created_at: When the message was produced
    """

    id: str
    chat_id: str
    role: str
    content: Any
    created_at: Timestamp = Field(default_factory=_now)


class Vote(Record):
    chat_id: str
    message_id: str
    is_upvoted: bool


class Document(Record):
    """
    One version of a document.

    Several rows share an ``id``; ``created_at`` tells the versions apart.
    """

    id: str
    created_at: Timestamp
    title: str
    content: Optional[str] = None
    kind: BlockKind = BlockKind.TEXT
    user_id: str


class Suggestion(Record):
    """
    Edit suggestion tied to the document version
    (``document_id``, ``document_created_at``).
    """

    id: str
    document_id: str
    document_created_at: Timestamp
    original_text: str
    suggested_text: str
    description: Optional[str] = None
    is_resolved: bool = False
    user_id: str
    created_at: Timestamp = Field(default_factory=_now)
