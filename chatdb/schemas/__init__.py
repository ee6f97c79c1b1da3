"""Record types returned by and passed to the repository layer."""

from chatdb.schemas.records import (
    BlockKind,
    Chat,
    Document,
    Message,
    Record,
    Suggestion,
    Timestamp,
    User,
    Visibility,
    Vote,
    VoteType,
)

__all__ = [
    "BlockKind",
    "Chat",
    "Document",
    "Message",
    "Record",
    "Suggestion",
    "Timestamp",
    "User",
    "Visibility",
    "Vote",
    "VoteType",
]
